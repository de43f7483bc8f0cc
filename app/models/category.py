import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Catalog category.

    Visibility vs purchasability are independent:
      - enabled=False hides the category from the home grid only;
        its products stay reachable by id.
      - ley_seca=True keeps the listing visible but blocks purchase
        of every product in the category.
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name",
    )

    image_url: str | None = Field(
        default=None,
        description="Cover image URL",
    )

    enabled: bool = Field(
        default=True,
        index=True,
        description="Whether the category is listed on the home grid",
    )

    ley_seca: bool = Field(
        default=False,
        description="Temporarily blocks purchase of all products in the category",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
