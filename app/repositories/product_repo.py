import uuid

from sqlalchemy import func, update
from sqlmodel import Session, select

from app.models.order import OrderItem
from app.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_external_code(self, session: Session, code: str) -> Product | None:
        stmt = select(Product).where(Product.external_code == code)
        return session.exec(stmt).first()

    def get_many(
        self,
        session: Session,
        product_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, Product]:
        if not product_ids:
            return {}
        stmt = select(Product).where(Product.id.in_(product_ids))
        return {p.id: p for p in session.exec(stmt).all()}

    @staticmethod
    def _name_filter(search: str):
        # Case-insensitive substring; % and _ in the term are literal
        escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return Product.name.ilike(f"%{escaped}%", escape="\\")

    def list_products(self, session: Session, search: str | None = None) -> list[Product]:
        stmt = select(Product)
        if search:
            stmt = stmt.where(self._name_filter(search))
        stmt = stmt.order_by(Product.name, Product.id)
        return session.exec(stmt).all()

    def list_featured(self, session: Session, limit: int = 12) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.featured == True)  # noqa: E712
            .order_by(Product.name, Product.id)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def page_by_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        offset: int,
        limit: int,
        search: str | None = None,
    ) -> tuple[list[Product], int]:
        """
        One page of a category's products plus the total number of matches.
        """
        conditions = [Product.category_id == category_id]
        if search:
            conditions.append(self._name_filter(search))

        stmt = (
            select(Product)
            .where(*conditions)
            .order_by(Product.name, Product.id)
            .offset(offset)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(Product).where(*conditions)

        products = session.exec(stmt).all()
        total = session.exec(count_stmt).one()
        return list(products), int(total or 0)

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def add(self, session: Session, product: Product) -> Product:
        """
        Insert or update without committing (caller owns the transaction).
        """
        session.add(product)
        session.flush()
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        """
        Delete a product. Past order items keep their snapshot and lose
        the product reference.
        """
        session.exec(
            update(OrderItem)
            .where(OrderItem.product_id == product.id)
            .values(product_id=None)
        )
        session.delete(product)
        session.commit()
