from decimal import Decimal
from io import BytesIO

import pytest
from openpyxl import Workbook
from sqlmodel import select

from app.models.category import Category
from app.models.product import Product
from app.services.import_service import (
    ImportFormatError,
    normalize_text,
    parse_decimal,
    resolve_columns,
)

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADERS = ["Código", "Nombre", "Existencia Actual", "Precio Máximo", "Marca"]


def _workbook(rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _upload(client, content: bytes):
    return client.post(
        "/api/products/import-excel",
        files={"excel": ("productos.xlsx", content, XLSX)},
    )


# -------- Header handling --------


def test_normalize_text_strips_accents_and_spacing():
    assert normalize_text("  Precio   Máximo ") == "precio maximo"
    assert normalize_text("CÓDIGO") == "codigo"


def test_resolve_columns_uses_alias_precedence():
    columns, ignored = resolve_columns(["Precio", "Codigo", "Producto", "Precio Maximo", "Notas"])

    assert columns["price"] == 3  # "precio maximo" wins over "precio"
    assert columns["code"] == 1
    assert columns["name"] == 2
    assert ignored == ["Precio", "Notas"]


def test_resolve_columns_reports_missing_fields():
    with pytest.raises(ImportFormatError) as exc:
        resolve_columns(["Nombre", "Existencia"])
    assert "code" in str(exc.value)
    assert "price" in str(exc.value)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12,50", Decimal("12.50")),
        (" 3.4 ", Decimal("3.4")),
        (7, Decimal(7)),
        (2.5, Decimal("2.5")),
        ("", None),
        ("abc", None),
        (None, None),
    ],
)
def test_parse_decimal(raw, expected):
    assert parse_decimal(raw) == expected


# -------- Endpoint --------


def test_import_creates_products_and_reports_row_errors(admin_client, session):
    content = _workbook(
        [
            HEADERS,
            ["1001", "Harina PAN", 10, 1.5, "Polar"],
            [1002, "Queso blanco POR PESO", 5.5, "8,50", None],
            [None, "Sin codigo", 1, 2, None],
            ["1003", "Gratis", 1, 0, None],
            ["1004", "Malo", 1, "abc", None],
        ]
    )

    response = _upload(admin_client, content)

    assert response.status_code == 200
    body = response.json()
    assert body["imported"] == 2
    assert len(body["errors"]) == 3
    assert body["errors"][0].startswith("Row 4:")
    assert body["ignored_columns"] == ["Marca"]

    products = {p.external_code: p for p in session.exec(select(Product)).all()}
    assert set(products) == {"1001", "1002"}
    assert products["1001"].measurement_type == "unit"
    assert products["1002"].measurement_type == "weight"
    assert products["1002"].price == Decimal("8.50")

    fallback = session.exec(select(Category).where(Category.name == "OTROS")).one()
    assert products["1001"].category_id == fallback.id


def test_reimport_updates_existing_products(admin_client, session, make_category, make_product):
    category = make_category("Viveres")
    make_product(category, "Harina PAN", "1.50", external_code="1001")
    make_product(category, "Jamon por peso", "9.00", external_code="1005")

    content = _workbook(
        [
            HEADERS,
            ["1001", "Harina PAN", 20, "1,75", None],
            ["1005", "Jamon por peso", 3, 9.5, None],
        ]
    )

    body = _upload(admin_client, content).json()

    assert body["imported"] == 2
    products = {p.external_code: p for p in session.exec(select(Product)).all()}
    assert len(products) == 2
    assert products["1001"].price == Decimal("1.75")
    assert products["1001"].stock == Decimal(20)
    assert products["1001"].category_id == category.id
    assert products["1005"].measurement_type == "weight"


def test_bad_price_row_does_not_stop_later_rows(admin_client, session):
    content = _workbook(
        [
            HEADERS,
            ["3001", "Gratis", 1, -2, None],
            ["3002", "Aceite", 4, 3.2, None],
        ]
    )

    body = _upload(admin_client, content).json()

    assert body["imported"] == 1
    assert body["errors"] == ["Row 2: invalid price -2 for 3001"]
    assert session.exec(select(Product)).one().external_code == "3002"


def test_negative_stock_is_clamped(admin_client, session):
    content = _workbook([HEADERS, ["2001", "Azucar", -4, 1.2, None]])

    _upload(admin_client, content)

    product = session.exec(select(Product)).one()
    assert product.stock == Decimal(0)


def test_missing_required_columns_rejects_file(admin_client, session):
    content = _workbook([["Nombre", "Existencia"], ["Harina", 2]])

    response = _upload(admin_client, content)

    assert response.status_code == 400
    assert "code" in response.json()["detail"]
    assert session.exec(select(Product)).all() == []


def test_unreadable_file_is_rejected(admin_client):
    response = _upload(admin_client, b"this is not a spreadsheet")
    assert response.status_code == 400


def test_missing_file_is_rejected(admin_client):
    response = admin_client.post("/api/products/import-excel")
    assert response.status_code == 400


def test_import_requires_admin(client):
    response = _upload(client, _workbook([HEADERS]))
    assert response.status_code == 401
