import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.types import Money, Quantity
from app.services.pricing import MAX_QUANTITY, MeasurementType

OrderStatus = Literal[
    "pending",
    "confirmed",
    "preparing",
    "ready",
    "delivered",
    "cancelled",
]


class OrderItemCreate(SQLModel):
    """
    One requested line at checkout. Price is always taken from the catalog.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: Decimal = Field(gt=0, le=MAX_QUANTITY, decimal_places=3)


class OrderCreate(SQLModel):
    """
    Checkout payload.

    User provides:
      - customer_name, customer_phone (required)
      - customer_email, customer_address, notes (optional)
      - items (optional; the session cart is used when omitted)

    Backend derives:
      - item snapshots and subtotals from current products
      - total = sum of subtotals
      - status = 'pending'
    """

    model_config = ConfigDict(extra="forbid")

    customer_name: str = Field(max_length=120)
    customer_phone: str = Field(max_length=40)
    customer_email: EmailStr | None = None
    customer_address: str | None = None
    notes: str | None = None
    items: list[OrderItemCreate] | None = None

    @field_validator("customer_name", "customer_phone")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("customer_email", "customer_address", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    customer_name: str
    customer_phone: str
    customer_email: str | None
    customer_address: str | None
    notes: str | None
    total: Money
    exchange_rate: Decimal | None
    status: OrderStatus
    created_at: datetime
    updated_at: datetime


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID | None
    product_name: str
    price: Money
    measurement_type: MeasurementType
    quantity: Quantity
    subtotal: Money


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
