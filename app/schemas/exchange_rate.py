from decimal import Decimal

from sqlmodel import SQLModel


class ExchangeRateRead(SQLModel):
    """
    Current USD -> VES rate, or available=False when the source is down.
    """

    available: bool
    rate: Decimal | None = None
    date: str | None = None
    source: str | None = None
