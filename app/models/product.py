import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog product.

    measurement_type:
      - "unit"   : price is per unit, ordered in whole units
      - "weight" : price is per kilogram, ordered in grams
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Unit price, or price per kilogram for weight products",
    )

    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        ondelete="CASCADE",
        index=True,
    )

    measurement_type: str = Field(
        default="unit",
        description="unit | weight",
    )

    image_url: str | None = Field(
        default=None,
        description="Product image URL",
    )

    stock: Decimal | None = Field(
        default=None,
        max_digits=12,
        decimal_places=3,
        description="Optional stock on hand",
    )

    featured: bool = Field(
        default=False,
        index=True,
        description="Shown in the featured strip on the home page",
    )

    # Code from the supplier spreadsheet; matches rows on re-import
    external_code: str | None = Field(
        default=None,
        unique=True,
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
