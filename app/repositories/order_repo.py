import uuid

from sqlmodel import Session, select

from app.models.order import Order, OrderItem


class OrderRepository:
    """
    Data access for orders and their item snapshots.

    Nothing here commits: checkout writes the header and its items as one
    unit, and the service owns that transaction.
    """

    def list_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status: str | None = None,
    ) -> list[Order]:
        """Newest first, optionally restricted to one status."""
        stmt = select(Order)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        stmt = stmt.order_by(Order.created_at.desc(), Order.id).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def add_order(self, session: Session, order: Order) -> Order:
        """Stage an order and flush so its id can be referenced by items."""
        session.add(order)
        session.flush()
        return order

    def save_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        return order

    def items_for(self, session: Session, order_id: uuid.UUID) -> list[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.product_name)
        return session.exec(stmt).all()

    def add_items(self, session: Session, items: list[OrderItem]) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        return items
