import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.exchange_rate import ExchangeRateClient
from app.models.order import Order, OrderItem
from app.repositories.category_repo import CategoryRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from app.services.cart_service import Cart
from app.services.pricing import MAX_AMOUNT, InvalidQuantityError, order_total

logger = logging.getLogger(__name__)

# Legal status moves; delivered and cancelled are terminal
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"preparing", "cancelled"},
    "preparing": {"ready"},
    "ready": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Validate requested lines against current products
      - Snapshot name/price/measurement type and price each line
      - Persist order header + items atomically
      - Enforce the status state machine (admin)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        rates: ExchangeRateClient,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.category_repo = category_repo
        self.rates = rates

    # -------- Checkout --------

    def _build_cart(
        self,
        session: Session,
        requested: list[tuple[uuid.UUID, Decimal]],
    ) -> Cart:
        """
        Merge requested lines into a Cart priced from the catalog.

        Every invalid line is collected; any error => 400 with all reasons.
        """
        products = self.product_repo.get_many(session, [pid for pid, _ in requested])
        cart = Cart()
        errors: list[dict[str, str]] = []

        for product_id, quantity in requested:
            product = products.get(product_id)
            if product is None:
                errors.append(
                    {
                        "product_id": str(product_id),
                        "reason": "Product not found",
                    }
                )
                continue

            category = self.category_repo.get_by_id(session, product.category_id)
            if category is not None and category.ley_seca:
                errors.append(
                    {
                        "product_id": str(product_id),
                        "reason": "Purchases in this category are temporarily blocked (ley seca)",
                    }
                )
                continue

            try:
                cart.add(product, quantity)
            except InvalidQuantityError as exc:
                errors.append(
                    {
                        "product_id": str(product_id),
                        "reason": str(exc),
                    }
                )

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Order validation failed", "items": errors},
            )
        return cart

    def submit_order(
        self,
        session: Session,
        payload: OrderCreate,
        requested: list[tuple[uuid.UUID, Decimal]],
    ) -> OrderWithItemsRead:
        """
        Turn the requested lines into a pending Order.

        Steps:
          1. Reject an empty request.
          2. Validate and merge lines (cart semantics).
          3. Snapshot each product and compute its subtotal now.
          4. total = exact sum of the snapshotted subtotals.
          5. Write header + items in one transaction; roll back on failure.
        """
        # 1) Nothing to order
        if not requested:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        # 2) Validate against catalog
        cart = self._build_cart(session, requested)

        # 3) Snapshot lines
        snapshots: list[OrderItem] = []
        for line in cart.lines:
            product = line.product
            snapshots.append(
                # order_id is set once the header has been flushed
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    price=product.price,
                    measurement_type=product.measurement_type,
                    quantity=line.quantity,
                    subtotal=line.subtotal,
                )
            )

        # 4) Total from the snapshots themselves
        total = order_total(item.subtotal for item in snapshots)
        if total > MAX_AMOUNT:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Order total exceeds the maximum allowed",
            )

        # Decoration only; no rate means no conversion
        rate = self.rates.get_rate()

        order = Order(
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone,
            customer_email=payload.customer_email,
            customer_address=payload.customer_address,
            notes=payload.notes,
            total=total,
            exchange_rate=rate.rate if rate is not None else None,
            status="pending",
        )

        # 5) Single transaction for header + items
        try:
            order = self.order_repo.add_order(session, order)
            for item in snapshots:
                item.order_id = order.id
            items = self.order_repo.add_items(session, snapshots)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Order creation failed, transaction rolled back")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create order",
            )

        session.refresh(order)
        logger.info("Order %s created: %d items, total %s", order.id, len(items), total)
        return self._build_order_with_items_dto(order, items)

    # -------- Admin operations --------

    def list_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status_filter: str | None = None,
    ) -> list[Order]:
        """
        List orders, newest first (admin only).
        """
        return self.order_repo.list_orders(session, skip, limit, status=status_filter)

    def get_order(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    def get_order_with_items(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        order = self.get_order(session, order_id)
        items = self.order_repo.items_for(session, order.id)
        return self._build_order_with_items_dto(order, items)

    def list_items(self, session: Session, order_id: uuid.UUID) -> list[OrderItem]:
        order = self.get_order(session, order_id)
        return self.order_repo.items_for(session, order.id)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> Order:
        """
        Admin-only status update with state machine:

          pending   -> confirmed, cancelled
          confirmed -> preparing, cancelled
          preparing -> ready
          ready     -> delivered
          delivered -> (terminal)
          cancelled -> (terminal)

        Same status is a no-op. Any other move raises 400.
        """
        order = self.get_order(session, order_id)

        current = order.status
        new = payload.status

        if current == new:
            return order

        if new not in ALLOWED_TRANSITIONS.get(current, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        order.status = new
        order.updated_at = datetime.now(timezone.utc)
        self.order_repo.save_order(session, order)
        session.commit()
        session.refresh(order)
        logger.info("Order %s status %s -> %s", order.id, current, new)
        return order

    # -------- Helper DTO builder --------

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        """
        Compose OrderWithItemsRead from ORM models. Subtotals are the
        stored values, never recomputed.
        """
        item_dtos = [
            OrderItemRead(
                id=it.id,
                order_id=it.order_id,
                product_id=it.product_id,
                product_name=it.product_name,
                price=it.price,
                measurement_type=it.measurement_type,
                quantity=it.quantity,
                subtotal=it.subtotal,
            )
            for it in items
        ]

        return OrderWithItemsRead(
            id=order.id,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            customer_email=order.customer_email,
            customer_address=order.customer_address,
            notes=order.notes,
            total=order.total,
            exchange_rate=order.exchange_rate,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=item_dtos,
        )
