# app/routers/products.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Query,
    UploadFile,
    status,
)
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    ProductCreate,
    ProductImportResult,
    ProductPage,
    ProductRead,
    ProductUpdate,
)
from app.services.import_service import ProductImportService
from app.services.product_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ProductService

router = APIRouter(prefix="/products", tags=["Products"])
admin_router = APIRouter(
    prefix="/admin/products",
    tags=["Products"],
    dependencies=[Depends(require_admin)],
)

repo = ProductRepository()
category_repo = CategoryRepository()
service = ProductService(repo, category_repo)
import_service = ProductImportService(repo, category_repo)

ADMIN_PAGE_SIZE = 200


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    search: str | None = None,
):
    """
    List all products, optionally filtered by a case-insensitive name search.
    """
    return service.list_products(session, search=search)


@router.get("/featured", response_model=list[ProductRead])
def list_featured_products(
    session: Session = Depends(get_session),
    limit: int = Query(12, ge=1, le=100),
):
    """
    Featured products for the home page.
    """
    return service.list_featured(session, limit=limit)


@router.get("/category/{category_id}", response_model=ProductPage)
def list_category_products(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: str | None = None,
):
    """
    One page of a category's products.

    - Ordered by name, then id.
    - `has_more` tells the client whether to request the next page.
    - Products of a ley seca category come back with `purchasable=false`.
    """
    return service.list_by_category(
        session,
        category_id,
        page=page,
        page_size=limit,
        search=search,
    )


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.
    """
    return service.get_product(session, product_id)


# -------- Admin endpoints --------


@admin_router.get("/category/{category_id}", response_model=ProductPage)
def list_category_products_admin(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(ADMIN_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: str | None = None,
):
    """
    Category listing for the back office (larger default page).
    """
    return service.list_by_category(
        session,
        category_id,
        page=page,
        page_size=limit,
        search=search,
    )


@router.post(
    "/import-excel",
    response_model=ProductImportResult,
    dependencies=[Depends(require_admin)],
    summary="Bulk create/update products from an .xlsx file",
)
def import_products_excel(
    excel: UploadFile | None = File(None),
    session: Session = Depends(get_session),
):
    """
    Import products from the first sheet of an Excel workbook.

    - Rows are matched on the product code (external_code).
    - Invalid rows are reported in `errors` and skipped.
    """
    if excel is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No Excel file provided",
        )

    file_bytes = excel.file.read()
    result = import_service.import_workbook(session, file_bytes)
    return ProductImportResult(
        message=f"Imported {result.imported} products",
        imported=result.imported,
        errors=result.errors,
        ignored_columns=result.ignored_columns,
    )


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).
    """
    return service.create_product(session, payload)


@router.put(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).
    """
    return service.update_product(session, product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a product (admin only). Past order items keep their snapshot.
    """
    service.delete_product(session, product_id)
    return None
