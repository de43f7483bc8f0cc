import uuid
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from app.core.exchange_rate import ExchangeRate
from app.models.order import Order, OrderItem
from app.routers import orders as orders_router

CUSTOMER = {
    "customer_name": "Maria Perez",
    "customer_phone": "0414-5551234",
    "customer_email": "maria@example.com",
    "customer_address": "Calle 5, Casa 12",
}


def test_submit_order_snapshots_items(client, session, make_category, make_product):
    category = make_category()
    flour = make_product(category, "Harina PAN", "1.50")
    cheese = make_product(category, "Queso", "4.45", "weight")

    response = client.post(
        "/api/orders",
        json={
            **CUSTOMER,
            "items": [
                {"product_id": str(flour.id), "quantity": 2},
                {"product_id": str(cheese.id), "quantity": 750},
            ],
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["total"] == 6.34  # 3.00 + 3.3375
    assert len(body["items"]) == 2

    order = session.get(Order, uuid.UUID(body["id"]))
    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all()
    assert order.total == sum((i.subtotal for i in items), Decimal(0))
    assert order.total == Decimal("6.3375")

    by_name = {i.product_name: i for i in items}
    assert by_name["Queso"].subtotal == Decimal("3.3375")
    assert by_name["Queso"].measurement_type == "weight"
    assert by_name["Harina PAN"].price == Decimal("1.50")


def test_order_total_has_no_per_line_rounding(client, session, make_category, make_product):
    category = make_category()
    a = make_product(category, "Jamon A", "4.45", "weight")
    b = make_product(category, "Jamon B", "4.45", "weight")

    response = client.post(
        "/api/orders",
        json={
            **CUSTOMER,
            "items": [
                {"product_id": str(a.id), "quantity": 750},
                {"product_id": str(b.id), "quantity": 750},
            ],
        },
    )

    order = session.get(Order, uuid.UUID(response.json()["id"]))
    assert order.total == Decimal("6.675")
    assert response.json()["total"] == 6.68


def test_later_price_change_does_not_touch_order(client, session, make_category, make_product):
    flour = make_product(make_category(), "Harina PAN", "1.50")
    body = client.post(
        "/api/orders",
        json={**CUSTOMER, "items": [{"product_id": str(flour.id), "quantity": 1}]},
    ).json()

    flour.price = Decimal("9.99")
    session.add(flour)
    session.commit()

    item = session.exec(select(OrderItem)).one()
    assert item.price == Decimal("1.50")
    assert session.get(Order, uuid.UUID(body["id"])).total == Decimal("1.50")


def test_order_uses_session_cart_and_clears_it(client, make_category, make_product):
    flour = make_product(make_category(), "Harina PAN", "1.50")
    client.post("/api/cart/items", json={"product_id": str(flour.id), "quantity": 4})

    response = client.post("/api/orders", json=CUSTOMER)

    assert response.status_code == 201
    assert response.json()["items"][0]["quantity"] == 4
    assert client.get("/api/cart").json()["items"] == []


def test_empty_order_is_rejected(client):
    response = client.post("/api/orders", json=CUSTOMER)
    assert response.status_code == 400
    assert response.json()["detail"] == "Cart is empty"


def test_customer_fields_are_required(client, make_category, make_product):
    flour = make_product(make_category())
    items = [{"product_id": str(flour.id), "quantity": 1}]

    no_name = {**CUSTOMER, "customer_name": "   ", "items": items}
    assert client.post("/api/orders", json=no_name).status_code == 422

    no_phone = {k: v for k, v in CUSTOMER.items() if k != "customer_phone"}
    assert client.post("/api/orders", json={**no_phone, "items": items}).status_code == 422

    bad_email = {**CUSTOMER, "customer_email": "not-an-email", "items": items}
    assert client.post("/api/orders", json=bad_email).status_code == 422


def test_invalid_lines_are_all_reported(client, session, make_category, make_product):
    flour = make_product(make_category(), "Harina PAN", "1.50")
    rum = make_product(make_category("Licores", ley_seca=True), "Ron", "10.00")
    missing = uuid.uuid4()

    response = client.post(
        "/api/orders",
        json={
            **CUSTOMER,
            "items": [
                {"product_id": str(flour.id), "quantity": 1.5},
                {"product_id": str(rum.id), "quantity": 1},
                {"product_id": str(missing), "quantity": 1},
            ],
        },
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["message"] == "Order validation failed"
    assert {e["product_id"] for e in detail["items"]} == {str(flour.id), str(rum.id), str(missing)}
    assert session.exec(select(Order)).all() == []


def test_duplicate_lines_are_merged(client, make_category, make_product):
    category = make_category()
    flour = make_product(category, "Harina PAN", "1.50")
    ham = make_product(category, "Jamon", "10.00", "weight")

    body = client.post(
        "/api/orders",
        json={
            **CUSTOMER,
            "items": [
                {"product_id": str(flour.id), "quantity": 1},
                {"product_id": str(flour.id), "quantity": 2},
                {"product_id": str(ham.id), "quantity": 500},
                {"product_id": str(ham.id), "quantity": 250},
            ],
        },
    ).json()

    quantities = {i["product_name"]: i["quantity"] for i in body["items"]}
    assert quantities == {"Harina PAN": 3, "Jamon": 250}


def test_failed_write_leaves_nothing_behind(client, session, monkeypatch, make_category, make_product):
    flour = make_product(make_category(), "Harina PAN", "1.50")
    client.post("/api/cart/items", json={"product_id": str(flour.id), "quantity": 1})

    def broken_add_items(session, items):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(orders_router.order_repo, "add_items", broken_add_items)

    response = client.post("/api/orders", json=CUSTOMER)

    assert response.status_code == 500
    assert session.exec(select(Order)).all() == []
    assert session.exec(select(OrderItem)).all() == []
    # cart survives a failed submission
    assert client.get("/api/cart").json()["count"] == 1


def test_exchange_rate_is_snapshotted(client, session, monkeypatch, make_category, make_product):
    class FixedRate:
        def get_rate(self):
            return ExchangeRate(rate=Decimal("36.50"), date="2024-05-01")

    monkeypatch.setattr(orders_router.service, "rates", FixedRate())
    flour = make_product(make_category())

    body = client.post(
        "/api/orders",
        json={**CUSTOMER, "items": [{"product_id": str(flour.id), "quantity": 1}]},
    ).json()

    assert session.get(Order, uuid.UUID(body["id"])).exchange_rate == Decimal("36.50")


# -------- Admin reads --------


def _place(client, product, quantity=1):
    return client.post(
        "/api/orders",
        json={**CUSTOMER, "items": [{"product_id": str(product.id), "quantity": quantity}]},
    ).json()


def test_order_reads_require_admin(client):
    assert client.get("/api/orders").status_code == 401
    assert client.get(f"/api/orders/{uuid.uuid4()}").status_code == 401


def test_admin_lists_and_reads_orders(admin_client, make_category, make_product):
    flour = make_product(make_category())
    placed = _place(admin_client, flour, 2)

    listing = admin_client.get("/api/orders").json()
    assert [o["id"] for o in listing] == [placed["id"]]

    detail = admin_client.get(f"/api/orders/{placed['id']}").json()
    assert detail["items"][0]["quantity"] == 2

    items = admin_client.get(f"/api/orders/{placed['id']}/items").json()
    assert len(items) == 1
    assert items[0]["subtotal"] == 3.0


def test_admin_filters_orders_by_status(admin_client, make_category, make_product):
    flour = make_product(make_category())
    first = _place(admin_client, flour)
    _place(admin_client, flour)
    admin_client.patch(f"/api/orders/{first['id']}/status", json={"status": "confirmed"})

    confirmed = admin_client.get("/api/orders", params={"status": "confirmed"}).json()

    assert [o["id"] for o in confirmed] == [first["id"]]


def test_unknown_order_is_404(admin_client):
    assert admin_client.get(f"/api/orders/{uuid.uuid4()}").status_code == 404


def test_weight_beyond_milligrams_is_rejected(client, session, make_category, make_product):
    cheese = make_product(make_category(), "Queso", "1.00", "weight")

    response = client.post(
        "/api/orders",
        json={**CUSTOMER, "items": [{"product_id": str(cheese.id), "quantity": "1.000006"}]},
    )

    assert response.status_code == 422
    assert session.exec(select(Order)).all() == []


def test_stored_total_matches_stored_items(client, session, make_category, make_product):
    category = make_category()
    a = make_product(category, "Queso A", "1.00", "weight")
    b = make_product(category, "Queso B", "1.00", "weight")

    response = client.post(
        "/api/orders",
        json={
            **CUSTOMER,
            "items": [
                {"product_id": str(a.id), "quantity": "1.005"},
                {"product_id": str(b.id), "quantity": "1.005"},
            ],
        },
    )

    assert response.status_code == 201
    order = session.get(Order, uuid.UUID(response.json()["id"]))
    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all()
    assert [i.quantity for i in items] == [Decimal("1.005"), Decimal("1.005")]
    assert order.total == sum((i.subtotal for i in items), Decimal(0))
    assert order.total == Decimal("0.00201")


def test_quantity_above_limit_is_rejected(client, make_category, make_product):
    flour = make_product(make_category(), "Harina PAN", "1.50")

    response = client.post(
        "/api/orders",
        json={**CUSTOMER, "items": [{"product_id": str(flour.id), "quantity": "1e10"}]},
    )

    assert response.status_code == 422


def test_total_too_large_to_store_is_rejected(client, session, make_category, make_product):
    pricey = make_product(make_category(), "Lingote", "99999999.99")

    response = client.post(
        "/api/orders",
        json={**CUSTOMER, "items": [{"product_id": str(pricey.id), "quantity": 1000}]},
    )

    assert response.status_code == 400
    assert session.exec(select(Order)).all() == []
