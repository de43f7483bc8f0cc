# app/routers/cart.py
import uuid

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlmodel import Session

from app.core.config import get_settings
from app.core.exchange_rate import get_exchange_rate_client
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.settings_repo import SiteSettingsRepository
from app.schemas.cart import CartItemCreate, CartItemUpdate, CartSummary
from app.services.cart_service import CartService
from app.services.settings_service import SiteSettingsService

settings = get_settings()

router = APIRouter(prefix="/cart", tags=["Cart"])

product_repo = ProductRepository()
category_repo = CategoryRepository()
settings_service = SiteSettingsService(SiteSettingsRepository())
service = CartService(
    product_repo,
    category_repo,
    settings_service,
    get_exchange_rate_client(),
)


def cart_cookie(
    token: str | None = Cookie(default=None, alias=settings.CART_COOKIE_NAME),
) -> str | None:
    """Raw signed cart cookie of the browsing session, if any."""
    return token


@router.get("", response_model=CartSummary)
def get_cart(
    session: Session = Depends(get_session),
    token: str | None = Depends(cart_cookie),
):
    """
    Current cart with subtotals, tax and the bolivares total.
    """
    cart = service.load(session, token)
    return service.summarize(session, cart)


@router.post("/items", response_model=CartSummary)
def add_cart_item(
    payload: CartItemCreate,
    response: Response,
    session: Session = Depends(get_session),
    token: str | None = Depends(cart_cookie),
):
    """
    Add a product to the cart.

    - unit products: quantity is added to any existing line.
    - weight products: quantity (grams) replaces the existing line.
    """
    cart = service.load(session, token)
    service.add_item(session, cart, payload)
    service.save(response, cart)
    return service.summarize(session, cart)


@router.patch("/items/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    response: Response,
    session: Session = Depends(get_session),
    token: str | None = Depends(cart_cookie),
):
    """
    Set the quantity of a cart line. 0 removes it.
    """
    cart = service.load(session, token)
    service.update_item(cart, product_id, payload)
    service.save(response, cart)
    return service.summarize(session, cart)


@router.delete("/items/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: uuid.UUID,
    response: Response,
    session: Session = Depends(get_session),
    token: str | None = Depends(cart_cookie),
):
    """
    Remove a product from the cart (no error if it is not there).
    """
    cart = service.load(session, token)
    service.remove_item(cart, product_id)
    service.save(response, cart)
    return service.summarize(session, cart)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_cart(response: Response):
    """
    Empty the cart.
    """
    service.discard(response)
    return None
