# app/routers/exchange_rate.py
from fastapi import APIRouter, Depends

from app.core.exchange_rate import ExchangeRateClient, get_exchange_rate_client
from app.schemas.exchange_rate import ExchangeRateRead

router = APIRouter(prefix="/exchange-rate", tags=["Exchange rate"])


@router.get("", response_model=ExchangeRateRead)
def get_exchange_rate(rates: ExchangeRateClient = Depends(get_exchange_rate_client)):
    """
    Current USD -> VES rate. `available=false` when the source is down
    or conversion is disabled.
    """
    rate = rates.get_rate()
    if rate is None:
        return ExchangeRateRead(available=False)
    return ExchangeRateRead(
        available=True,
        rate=rate.rate,
        date=rate.date,
        source=rate.source,
    )
