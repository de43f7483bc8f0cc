import uuid

from sqlalchemy import delete
from sqlmodel import Session, select

from app.models.category import Category
from app.models.product import Product


class CategoryRepository:
    """
    Data access layer for Category.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    def get_by_name(self, session: Session, name: str) -> Category | None:
        stmt = select(Category).where(Category.name == name)
        return session.exec(stmt).first()

    def list_categories(self, session: Session, only_enabled: bool = False) -> list[Category]:
        stmt = select(Category)
        if only_enabled:
            stmt = stmt.where(Category.enabled == True)  # noqa: E712
        stmt = stmt.order_by(Category.name)
        return session.exec(stmt).all()

    def create(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def add(self, session: Session, category: Category) -> Category:
        """
        Insert without committing (caller owns the transaction).
        """
        session.add(category)
        session.flush()
        return category

    def update(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def delete(self, session: Session, category: Category) -> None:
        """
        Delete a category together with its products, in one commit.
        """
        session.exec(delete(Product).where(Product.category_id == category.id))
        session.delete(category)
        session.commit()
