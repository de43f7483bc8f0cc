import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.category import Category
from app.repositories.category_repo import CategoryRepository
from app.schemas.category import CategoryCreate, CategoryUpdate


class CategoryService:
    """
    Business logic for categories.

    Responsibilities:
      - 404 mapping for unknown ids
      - home-grid filtering (enabled only)
      - cascade delete of a category's products (via repository)
    """

    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    def list_categories(self, session: Session, enabled_only: bool = False) -> list[Category]:
        return self.repo.list_categories(session, only_enabled=enabled_only)

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.repo.get_by_id(session, category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        category = Category(**payload.model_dump())
        return self.repo.create(session, category)

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> Category:
        category = self.get_category(session, category_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            # only image_url may be cleared with an explicit null
            if value is None and field != "image_url":
                continue
            setattr(category, field, value)
        return self.repo.update(session, category)

    def delete_category(self, session: Session, category_id: uuid.UUID) -> None:
        """
        Delete a category and every product in it.
        """
        category = self.get_category(session, category_id)
        self.repo.delete(session, category)
