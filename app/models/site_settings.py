import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


# Fixed key so concurrent first reads cannot insert a second row
SITE_SETTINGS_ID = uuid.UUID(int=1)


class SiteSettings(SQLModel, table=True):
    """
    Singleton storefront configuration (at most one row).
    """

    __tablename__ = "site_settings"

    id: uuid.UUID = Field(
        default=SITE_SETTINGS_ID,
        primary_key=True,
    )

    site_name: str = "FV BODEGONES"
    site_description: str = "Tu bodega de confianza para productos de consumo diario"
    contact_phone: str = ""
    contact_email: str = ""
    contact_address: str = ""

    facebook_url: str | None = None
    instagram_url: str | None = None
    twitter_url: str | None = None
    whatsapp_url: str | None = None

    # Home carousel, three fixed slides
    enable_carousel1: bool = True
    carousel_title1: str | None = None
    carousel_subtitle1: str | None = None
    carousel_description1: str | None = None
    carousel_image1: str | None = None
    carousel_background1: str | None = None
    carousel_button1: str | None = None
    carousel_url1: str | None = None

    enable_carousel2: bool = True
    carousel_title2: str | None = None
    carousel_subtitle2: str | None = None
    carousel_description2: str | None = None
    carousel_image2: str | None = None
    carousel_background2: str | None = None
    carousel_button2: str | None = None
    carousel_url2: str | None = None

    enable_carousel3: bool = True
    carousel_title3: str | None = None
    carousel_subtitle3: str | None = None
    carousel_description3: str | None = None
    carousel_image3: str | None = None
    carousel_background3: str | None = None
    carousel_button3: str | None = None
    carousel_url3: str | None = None

    tax_percentage: Decimal = Field(
        default=Decimal("0"),
        max_digits=5,
        decimal_places=2,
        description="Tax shown on the cart quote, 0-100",
    )

    # Pago movil instructions shown at checkout
    payment_bank: str | None = None
    payment_ci: str | None = None
    payment_phone: str | None = None
    payment_instructions: str | None = None

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
