"""
Bulk product import from a supplier spreadsheet (.xlsx).

Header names are matched through an explicit alias table after
normalization (accents stripped, whitespace collapsed, lowercase).
Each row is isolated in its own savepoint: a bad row is reported and
skipped, the rest of the file is still imported.
"""

import logging
import unicodedata
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from io import BytesIO
from typing import Any
from zipfile import BadZipFile

from fastapi import HTTPException, status
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.models.category import Category
from app.models.product import Product
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository

logger = logging.getLogger(__name__)

# Catch-all category for products created by the import
FALLBACK_CATEGORY = "OTROS"

# A product whose name contains this is sold by weight
WEIGHT_MARKER = "por peso"

# canonical field -> accepted normalized headers, in precedence order
HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "code": ("codigo", "cod", "code", "sku"),
    "name": ("nombre", "producto", "descripcion", "name"),
    "stock": ("existencia actual", "existencia", "stock", "cantidad"),
    "price": ("precio maximo", "precio maximoo", "precio", "price"),
}

REQUIRED_FIELDS: tuple[str, ...] = ("code", "name", "price")


@dataclass
class ImportResult:
    imported: int = 0
    errors: list[str] = field(default_factory=list)
    ignored_columns: list[str] = field(default_factory=list)


class ImportFormatError(ValueError):
    """The workbook cannot be imported at all (unreadable, missing columns)."""


def normalize_text(value: Any) -> str:
    """
    'Precio  Máximo ' -> 'precio maximo'
    """
    text = unicodedata.normalize("NFD", str(value))
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return " ".join(text.split()).lower()


def resolve_columns(headers: list[Any]) -> tuple[dict[str, int], list[str]]:
    """
    Map canonical fields to column indexes.

    Returns (columns, ignored) where ignored lists the raw header
    text of every non-empty column no field claimed.

    Raises:
        ImportFormatError: if a required field has no column.
    """
    normalized = [normalize_text(h) if h is not None else "" for h in headers]

    columns: dict[str, int] = {}
    for canonical, aliases in HEADER_ALIASES.items():
        for alias in aliases:
            if alias in normalized:
                columns[canonical] = normalized.index(alias)
                break

    missing = [f for f in REQUIRED_FIELDS if f not in columns]
    if missing:
        raise ImportFormatError(
            "Missing required columns: " + ", ".join(missing)
        )

    used = set(columns.values())
    ignored = [
        str(h).strip()
        for idx, h in enumerate(headers)
        if idx not in used and normalized[idx]
    ]
    return columns, ignored


def parse_decimal(value: Any) -> Decimal | None:
    """
    Numeric cell or text with a decimal comma ("12,50") -> Decimal.
    Blank or unparseable -> None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = Decimal(str(value))
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    return number if number.is_finite() else None


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    # Excel stores numeric codes as floats (1001.0)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class ProductImportService:
    """
    Upsert products from a spreadsheet.

    Rules per row:
      - code and name required, price > 0
      - existing product (matched by external code): price and stock
        updated, switched to weight when the name says "por peso"
      - new product: created under the OTROS category
    """

    def __init__(self, product_repo: ProductRepository, category_repo: CategoryRepository):
        self.product_repo = product_repo
        self.category_repo = category_repo

    def _fallback_category(self, session: Session) -> Category:
        category = self.category_repo.get_by_name(session, FALLBACK_CATEGORY)
        if category is None:
            category = self.category_repo.add(
                session, Category(name=FALLBACK_CATEGORY, enabled=True)
            )
        return category

    @staticmethod
    def _read_rows(file_bytes: bytes) -> list[tuple]:
        try:
            workbook = load_workbook(BytesIO(file_bytes), read_only=True, data_only=True)
        except (InvalidFileException, BadZipFile, KeyError, OSError, ValueError) as exc:
            raise ImportFormatError(f"Could not read Excel file: {exc}") from exc

        try:
            sheet = workbook.worksheets[0]
            return list(sheet.iter_rows(values_only=True))
        finally:
            workbook.close()

    def _upsert(
        self,
        session: Session,
        fallback: Category,
        code: str,
        name: str,
        price: Decimal,
        stock: Decimal,
    ) -> None:
        is_weight = WEIGHT_MARKER in normalize_text(name)
        existing = self.product_repo.get_by_external_code(session, code)

        if existing is not None:
            existing.price = price
            existing.stock = stock
            if is_weight:
                existing.measurement_type = "weight"
            self.product_repo.add(session, existing)
            return

        self.product_repo.add(
            session,
            Product(
                name=name,
                price=price,
                category_id=fallback.id,
                external_code=code,
                stock=stock,
                measurement_type="weight" if is_weight else "unit",
            ),
        )

    def import_workbook(self, session: Session, file_bytes: bytes) -> ImportResult:
        """
        Import every data row of the first sheet.

        Raises:
            HTTPException(400): unreadable file, empty sheet, or
                required columns missing.
        """
        try:
            rows = self._read_rows(file_bytes)
            if not rows:
                raise ImportFormatError("Spreadsheet is empty")
            columns, ignored = resolve_columns(list(rows[0]))
        except ImportFormatError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            )

        result = ImportResult(ignored_columns=ignored)
        fallback = self._fallback_category(session)

        def cell(row: tuple, canonical: str) -> Any:
            idx = columns.get(canonical)
            if idx is None or idx >= len(row):
                return None
            return row[idx]

        for row_number, row in enumerate(rows[1:], start=2):
            if all(v is None or str(v).strip() == "" for v in row):
                continue

            code = cell_text(cell(row, "code"))
            name = cell_text(cell(row, "name"))
            raw_price = cell(row, "price")
            price = parse_decimal(raw_price)
            stock = parse_decimal(cell(row, "stock")) or Decimal(0)

            if price is not None:
                price = price.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

            if not code or not name:
                result.errors.append(f"Row {row_number}: missing code or name")
                continue
            if price is None or price <= 0:
                result.errors.append(f"Row {row_number}: invalid price {raw_price!r} for {code}")
                continue

            if stock < 0:
                stock = Decimal(0)

            try:
                with session.begin_nested():
                    self._upsert(session, fallback, code, name, price, stock)
            except SQLAlchemyError as exc:
                logger.warning("Import row %d (%s) failed: %s", row_number, code, exc)
                result.errors.append(f"Row {row_number}: could not save product {code}")
                continue

            result.imported += 1

        session.commit()
        logger.info(
            "Excel import: %d imported, %d errors", result.imported, len(result.errors)
        )
        return result
