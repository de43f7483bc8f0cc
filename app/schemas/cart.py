import uuid
from decimal import Decimal

from sqlmodel import SQLModel, Field

from app.schemas.types import Money, Quantity
from app.services.pricing import MAX_QUANTITY, MeasurementType


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.

    quantity is a unit count, or grams for weight products.
    """

    product_id: uuid.UUID
    quantity: Decimal = Field(gt=0, le=MAX_QUANTITY, decimal_places=3)


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart line.
    0 removes the line.
    """

    quantity: Decimal = Field(ge=0, le=MAX_QUANTITY, decimal_places=3)


class CartLineRead(SQLModel):
    """
    Read model for a single cart line, including its subtotal.
    """

    product_id: uuid.UUID
    name: str
    price: Money
    measurement_type: MeasurementType
    image_url: str | None = None
    quantity: Quantity
    subtotal: Money


class CartSummary(SQLModel):
    """
    Full cart response model with totals.

    exchange_rate / total_bs are null when the rate service is unavailable.
    """

    items: list[CartLineRead]
    count: int
    total: Money
    tax_percentage: Decimal
    tax_amount: Money
    total_with_tax: Money
    exchange_rate: Decimal | None = None
    total_bs: Money | None = None
