"""
USD -> VES exchange rate lookup.

The rate only decorates totals (bolivares next to dollars). Any failure
here is logged and reported as "no rate"; it never blocks the cart or
checkout.
"""

import logging
import threading
import time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import httpx

from app.core.config import get_settings

logger = logging.getLogger(__name__)

SOURCE_NAME = "DolarVzla"


@dataclass(frozen=True)
class ExchangeRate:
    rate: Decimal
    date: str | None
    source: str = SOURCE_NAME


class ExchangeRateClient:
    """Fetches and caches the official USD rate."""

    def __init__(
        self,
        url: str,
        ttl_seconds: int = 300,
        timeout: float = 5.0,
        retry_seconds: int = 60,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.ttl_seconds = ttl_seconds
        self.timeout = timeout
        self.retry_seconds = retry_seconds
        self.transport = transport
        self._cached: ExchangeRate | None = None
        self._fetched_at = 0.0
        self._failed_at: float | None = None
        self._refreshing = False
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def get_rate(self) -> ExchangeRate | None:
        """
        Return the current rate, refreshing the cache when stale.

        Returns None when disabled or when the source cannot be read
        and nothing is cached yet. A stale cached value is preferred
        over None. After a failed fetch the source is not contacted
        again for `retry_seconds`, and only one caller refreshes at a
        time; the others get whatever is cached.
        """
        if not self.enabled:
            return None

        with self._lock:
            now = time.monotonic()
            if self._cached is not None and now - self._fetched_at < self.ttl_seconds:
                return self._cached
            if self._failed_at is not None and now - self._failed_at < self.retry_seconds:
                return self._cached
            if self._refreshing:
                return self._cached
            self._refreshing = True

        # Network call happens without holding the lock
        fresh = None
        try:
            fresh = self._fetch()
        finally:
            with self._lock:
                self._refreshing = False
                now = time.monotonic()
                if fresh is not None:
                    self._cached = fresh
                    self._fetched_at = now
                    self._failed_at = None
                else:
                    self._failed_at = now

        return fresh if fresh is not None else self._cached

    def _fetch(self) -> ExchangeRate | None:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.url)
                response.raise_for_status()
                data = response.json()
            current = data["current"]
            rate = Decimal(str(current["usd"]))
        except (httpx.HTTPError, ValueError, KeyError, TypeError, InvalidOperation) as exc:
            logger.warning("Exchange rate unavailable (%s): %s", self.url, exc)
            return None

        if rate <= 0:
            logger.warning("Exchange rate source returned non-positive rate: %s", rate)
            return None

        return ExchangeRate(rate=rate, date=current.get("date"))


_client: ExchangeRateClient | None = None


def get_exchange_rate_client() -> ExchangeRateClient:
    """Process-wide client built from settings."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = ExchangeRateClient(
            settings.EXCHANGE_RATE_URL,
            ttl_seconds=settings.EXCHANGE_RATE_TTL_SECONDS,
            timeout=settings.EXCHANGE_RATE_TIMEOUT,
            retry_seconds=settings.EXCHANGE_RATE_RETRY_SECONDS,
        )
    return _client
