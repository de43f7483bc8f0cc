# app/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.core.exchange_rate import get_exchange_rate_client
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.routers.cart import cart_cookie, service as cart_service
from app.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
product_repo = ProductRepository()
category_repo = CategoryRepository()
service = OrderService(order_repo, product_repo, category_repo, get_exchange_rate_client())


# -------- Storefront endpoint --------


@router.post(
    "",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_order(
    payload: OrderCreate,
    response: Response,
    session: Session = Depends(get_session),
    token: str | None = Depends(cart_cookie),
):
    """
    Place an order.

    - Lines come from `items` when given, otherwise from the session cart.
    - Prices are always taken from the catalog, never from the client.
    - The cart cookie is cleared only once the order is stored.
    """
    if payload.items is not None:
        requested = [(item.product_id, item.quantity) for item in payload.items]
    else:
        cart = cart_service.load(session, token)
        requested = [(line.product.id, line.quantity) for line in cart.lines]

    order = service.submit_order(session, payload, requested)
    cart_service.discard(response)
    return order


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_orders(
    session: Session = Depends(get_session),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    status_filter: OrderStatus | None = Query(None, alias="status"),
):
    """
    List orders, newest first (admin only).
    """
    return service.list_orders(session, skip, limit, status_filter=status_filter)


@router.get(
    "/{order_id}",
    response_model=OrderWithItemsRead,
    dependencies=[Depends(require_admin)],
)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get an order with its items (admin only).
    """
    return service.get_order_with_items(session, order_id)


@router.get(
    "/{order_id}/items",
    response_model=list[OrderItemRead],
    dependencies=[Depends(require_admin)],
)
def list_order_items(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.list_items(session, order_id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Move an order through its lifecycle (admin only).

      pending   -> confirmed, cancelled

      confirmed -> preparing, cancelled

      preparing -> ready

      ready     -> delivered

      delivered, cancelled -> (no change)

    """
    return service.update_status(session, order_id, payload)
