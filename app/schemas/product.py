import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.types import Money, Quantity
from app.services.pricing import MeasurementType


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - price accepts a JSON number or a numeric string ("12.50").
    - for weight products price is per kilogram.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category_id: uuid.UUID
    measurement_type: MeasurementType = "unit"
    image_url: str | None = None
    stock: Decimal | None = Field(default=None, ge=0)
    featured: bool = False
    external_code: str | None = Field(default=None, max_length=64)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("external_code")
    @classmethod
    def normalize_code(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category_id: uuid.UUID | None = None
    measurement_type: MeasurementType | None = None
    image_url: str | None = None
    stock: Decimal | None = Field(default=None, ge=0)
    featured: bool | None = None
    external_code: str | None = Field(default=None, max_length=64)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    price: Money
    category_id: uuid.UUID
    measurement_type: MeasurementType
    image_url: str | None
    stock: Quantity | None
    featured: bool
    external_code: str | None
    created_at: datetime


class ProductListItem(ProductRead):
    """
    Product inside a category listing.

    `purchasable` is False when the category is under ley seca:
    the product is shown but cannot be added to the cart.
    """

    purchasable: bool = True


class ProductPage(SQLModel):
    """
    One page of a category listing.
    """

    products: list[ProductListItem]
    total: int
    page: int
    page_size: int
    has_more: bool
    ley_seca: bool = False


class ProductImportResult(SQLModel):
    """
    Outcome of a spreadsheet import.
    """

    message: str
    imported: int
    errors: list[str]
    ignored_columns: list[str] = []
