import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order placed from the storefront checkout.

    Only `status` (and `updated_at`) change after creation.
    `total` is the exact sum of the order's item subtotals.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    customer_name: str = Field(
        max_length=120,
        description="Name of the customer placing the order",
    )
    customer_phone: str = Field(
        max_length=40,
        description="Contact phone number",
    )
    customer_email: str | None = Field(default=None)
    customer_address: str | None = Field(
        default=None,
        description="Delivery address",
    )
    notes: str | None = Field(
        default=None,
        description="Optional note / special instructions",
    )

    total: Decimal = Field(
        max_digits=18,
        decimal_places=8,
        description="Sum of item subtotals (unrounded)",
    )

    # USD -> VES rate at checkout, null when the rate was unavailable
    exchange_rate: Decimal | None = Field(
        default=None,
        max_digits=18,
        decimal_places=4,
    )

    # pending | confirmed | preparing | ready | delivered | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last status change (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Snapshot of one product line at the moment the order was placed.

    Name, price, measurement type and quantity are copied from the
    product so later catalog edits do not change historical orders.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        ondelete="CASCADE",
        index=True,
    )

    # Nulled when the product is deleted; the snapshot stays
    product_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="products.id",
        ondelete="SET NULL",
        index=True,
    )

    product_name: str = Field(max_length=255)

    price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Unit (or per-kg) price at time of order",
    )

    measurement_type: str = Field(description="unit | weight")

    quantity: Decimal = Field(
        max_digits=12,
        decimal_places=3,
        description="Units, or grams for weight products",
    )

    subtotal: Decimal = Field(
        max_digits=18,
        decimal_places=8,
        description="Stored pricing result, never recomputed",
    )
