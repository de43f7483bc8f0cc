import uuid
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from fastapi import HTTPException, Response, status
from sqlmodel import Session

from app.core.config import get_settings
from app.core.exchange_rate import ExchangeRateClient
from app.core.signing import InvalidTokenError, decode_token, encode_token
from app.models.product import Product
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartItemCreate, CartItemUpdate, CartLineRead, CartSummary
from app.services.pricing import (
    InvalidQuantityError,
    apply_tax,
    convert_currency,
    line_subtotal,
    order_total,
    validate_quantity,
)
from app.services.settings_service import SiteSettingsService

settings = get_settings()


@dataclass
class CartLine:
    product: Product
    quantity: Decimal

    @property
    def subtotal(self) -> Decimal:
        return line_subtotal(
            self.product.price,
            self.product.measurement_type,
            self.quantity,
        )


class Cart:
    """
    Shopping cart keyed by product id.

    Merge rules on add:
      - unit products accumulate (2 + 3 => 5)
      - weight products are replaced (500 g then 750 g => 750 g),
        a weight entry states the total amount wanted
    """

    def __init__(self) -> None:
        self._lines: dict[uuid.UUID, CartLine] = {}

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: uuid.UUID) -> bool:
        return product_id in self._lines

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def get(self, product_id: uuid.UUID) -> CartLine | None:
        return self._lines.get(product_id)

    def add(self, product: Product, quantity: Decimal) -> CartLine:
        quantity = validate_quantity(product.measurement_type, quantity)
        line = self._lines.get(product.id)

        if line is None:
            line = CartLine(product=product, quantity=quantity)
            self._lines[product.id] = line
        elif product.measurement_type == "unit":
            line.quantity = validate_quantity("unit", line.quantity + quantity)
        else:
            line.quantity = quantity

        line.product = product
        return line

    def update_quantity(self, product_id: uuid.UUID, quantity: Decimal) -> None:
        """
        Absolute set. 0 removes the line.

        Raises:
            KeyError: if the product is not in the cart.
        """
        line = self._lines[product_id]
        if Decimal(quantity) == 0:
            del self._lines[product_id]
            return
        line.quantity = validate_quantity(line.product.measurement_type, quantity)

    def remove(self, product_id: uuid.UUID) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def total(self) -> Decimal:
        return order_total(line.subtotal for line in self._lines.values())

    def count(self) -> int:
        """Distinct lines, not units (cart badge)."""
        return len(self._lines)

    # ---- serialization ----

    def to_payload(self) -> list[dict[str, str]]:
        return [
            {"product_id": str(pid), "quantity": str(line.quantity)}
            for pid, line in self._lines.items()
        ]

    @classmethod
    def from_payload(
        cls,
        payload: list[dict[str, Any]],
        products: Mapping[uuid.UUID, Product],
    ) -> "Cart":
        """
        Rebuild a cart against current products.

        Lines whose product is gone, or whose quantity no longer fits
        the product's measurement type, are dropped.
        """
        cart = cls()
        for entry in payload:
            try:
                product_id = uuid.UUID(str(entry["product_id"]))
                quantity = Decimal(str(entry["quantity"]))
            except (KeyError, TypeError, ValueError, InvalidOperation):
                continue
            product = products.get(product_id)
            if product is None:
                continue
            try:
                cart.add(product, quantity)
            except InvalidQuantityError:
                continue
        return cart


class CartService:
    """
    Cart operations for the storefront session.

    The cart lives in a signed cookie (no server-side rows until
    checkout). Responsibilities:
      - load/save the cart from/to the cookie
      - validate products (exists, category not under ley seca)
      - compute totals, tax and the bolivares equivalent
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        settings_service: SiteSettingsService,
        rates: ExchangeRateClient,
    ):
        self.product_repo = product_repo
        self.category_repo = category_repo
        self.settings_service = settings_service
        self.rates = rates

    # ---- cookie round trip ----

    def load(self, session: Session, token: str | None) -> Cart:
        if not token:
            return Cart()
        try:
            claims = decode_token(token)
        except InvalidTokenError:
            return Cart()

        payload = claims.get("lines")
        if not isinstance(payload, list):
            return Cart()

        ids: list[uuid.UUID] = []
        for entry in payload:
            try:
                ids.append(uuid.UUID(str(entry["product_id"])))
            except (KeyError, TypeError, ValueError):
                continue

        products = self.product_repo.get_many(session, ids)
        return Cart.from_payload(payload, products)

    def save(self, response: Response, cart: Cart) -> None:
        ttl = timedelta(days=settings.CART_TTL_DAYS)
        token = encode_token({"lines": cart.to_payload()}, ttl)
        response.set_cookie(
            key=settings.CART_COOKIE_NAME,
            value=token,
            max_age=int(ttl.total_seconds()),
            httponly=True,
            secure=settings.SESSION_COOKIE_SECURE,
            samesite="lax",
        )

    def discard(self, response: Response) -> None:
        response.delete_cookie(key=settings.CART_COOKIE_NAME)

    # ---- operations ----

    def get_purchasable_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        category = self.category_repo.get_by_id(session, product.category_id)
        if category is not None and category.ley_seca:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Purchases in this category are temporarily blocked (ley seca)",
            )
        return product

    def add_item(self, session: Session, cart: Cart, payload: CartItemCreate) -> Cart:
        product = self.get_purchasable_product(session, payload.product_id)
        try:
            cart.add(product, payload.quantity)
        except InvalidQuantityError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            )
        return cart

    def update_item(
        self,
        cart: Cart,
        product_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> Cart:
        try:
            cart.update_quantity(product_id, payload.quantity)
        except KeyError:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not in cart",
            )
        except InvalidQuantityError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            )
        return cart

    def remove_item(self, cart: Cart, product_id: uuid.UUID) -> Cart:
        cart.remove(product_id)
        return cart

    def summarize(self, session: Session, cart: Cart) -> CartSummary:
        """
        Full cart summary:
          - lines with subtotal
          - count (distinct lines) and total
          - tax from site settings, and total in bolivares when a rate is known
        """
        items = [
            CartLineRead(
                product_id=line.product.id,
                name=line.product.name,
                price=line.product.price,
                measurement_type=line.product.measurement_type,
                image_url=line.product.image_url,
                quantity=line.quantity,
                subtotal=line.subtotal,
            )
            for line in cart.lines
        ]

        total = cart.total()
        tax_percentage = self.settings_service.tax_percentage(session)
        tax_amount = apply_tax(total, tax_percentage)
        total_with_tax = total + tax_amount

        rate = self.rates.get_rate()
        rate_value = rate.rate if rate is not None else None

        return CartSummary(
            items=items,
            count=cart.count(),
            total=total,
            tax_percentage=tax_percentage,
            tax_amount=tax_amount,
            total_with_tax=total_with_tax,
            exchange_rate=rate_value,
            total_bs=convert_currency(total_with_tax, rate_value),
        )
