import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class SiteSettingsBase(SQLModel):
    site_name: str
    site_description: str
    contact_phone: str
    contact_email: str
    contact_address: str

    facebook_url: str | None = None
    instagram_url: str | None = None
    twitter_url: str | None = None
    whatsapp_url: str | None = None

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

    tax_percentage: Decimal = Decimal("0")

    payment_bank: str | None = None
    payment_ci: str | None = None
    payment_phone: str | None = None
    payment_instructions: str | None = None


class SiteSettingsRead(SiteSettingsBase):
    id: uuid.UUID
    updated_at: datetime


class SiteSettingsUpdate(SQLModel):
    """
    Partial update; only fields present in the body are written.
    """

    model_config = ConfigDict(extra="forbid")

    site_name: str | None = Field(default=None, min_length=1)
    site_description: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    contact_address: str | None = None

    facebook_url: str | None = None
    instagram_url: str | None = None
    twitter_url: str | None = None
    whatsapp_url: str | None = None

    enable_carousel1: bool | None = None
    carousel_title1: str | None = None
    carousel_subtitle1: str | None = None
    carousel_description1: str | None = None
    carousel_image1: str | None = None
    carousel_background1: str | None = None
    carousel_button1: str | None = None
    carousel_url1: str | None = None

    enable_carousel2: bool | None = None
    carousel_title2: str | None = None
    carousel_subtitle2: str | None = None
    carousel_description2: str | None = None
    carousel_image2: str | None = None
    carousel_background2: str | None = None
    carousel_button2: str | None = None
    carousel_url2: str | None = None

    enable_carousel3: bool | None = None
    carousel_title3: str | None = None
    carousel_subtitle3: str | None = None
    carousel_description3: str | None = None
    carousel_image3: str | None = None
    carousel_background3: str | None = None
    carousel_button3: str | None = None
    carousel_url3: str | None = None

    tax_percentage: Decimal | None = Field(default=None, ge=0, le=100)

    payment_bank: str | None = None
    payment_ci: str | None = None
    payment_phone: str | None = None
    payment_instructions: str | None = None
