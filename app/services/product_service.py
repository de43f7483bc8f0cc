import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.product import Product
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    ProductCreate,
    ProductListItem,
    ProductPage,
    ProductUpdate,
)

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 500


class ProductService:
    """
    Business logic for Product.

    Responsibilities:
      - category listing with search + pagination (has_more contract)
      - validation beyond pydantic (category exists, unique external code)
      - admin CRUD (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository, category_repo: CategoryRepository):
        self.repo = repo
        self.category_repo = category_repo

    # ----- Helpers -----

    def _ensure_category(self, session: Session, category_id: uuid.UUID) -> None:
        if self.category_repo.get_by_id(session, category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )

    def _ensure_unique_code(
        self,
        session: Session,
        code: str | None,
        product_id: uuid.UUID | None = None,
    ) -> None:
        if not code:
            return
        existing = self.repo.get_by_external_code(session, code)
        if existing is not None and existing.id != product_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"External code already in use: {code}",
            )

    # ----- Queries -----

    def list_products(self, session: Session, search: str | None = None) -> list[Product]:
        term = search.strip() if search else None
        return self.repo.list_products(session, search=term or None)

    def list_featured(self, session: Session, limit: int = 12) -> list[Product]:
        return self.repo.list_featured(session, limit=limit)

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def list_by_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        search: str | None = None,
    ) -> ProductPage:
        """
        One page of a category's products.

        - search is trimmed; empty means no name filter.
        - page is 1-indexed; has_more = offset + returned < total.
        - disabled categories are still served (hidden from the grid only).
        - ley seca categories are served too, with purchasable=False.
        """
        category = self.category_repo.get_by_id(session, category_id)
        if category is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )

        term = search.strip() if search else ""
        offset = (page - 1) * page_size

        products, total = self.repo.page_by_category(
            session,
            category_id,
            offset=offset,
            limit=page_size,
            search=term or None,
        )

        purchasable = not category.ley_seca
        items = [
            ProductListItem(**p.model_dump(), purchasable=purchasable)
            for p in products
        ]

        return ProductPage(
            products=items,
            total=total,
            page=page,
            page_size=page_size,
            has_more=offset + len(items) < total,
            ley_seca=category.ley_seca,
        )

    # ----- Admin CRUD -----

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        self._ensure_category(session, payload.category_id)
        self._ensure_unique_code(session, payload.external_code)

        product = Product(**payload.model_dump())
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product.
        """
        product = self.get_product(session, product_id)
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("category_id") is not None:
            self._ensure_category(session, changes["category_id"])

        if "external_code" in changes:
            code = (changes["external_code"] or "").strip() or None
            self._ensure_unique_code(session, code, product.id)
            changes["external_code"] = code

        for field, value in changes.items():
            # Required columns cannot be cleared with an explicit null
            if value is None and field in {"name", "price", "category_id", "measurement_type", "featured"}:
                continue
            setattr(product, field, value)

        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        product = self.get_product(session, product_id)
        self.repo.delete(session, product)
