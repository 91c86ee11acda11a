import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Protocol

from application.utils.time import utc_now
from domain.exceptions.currency import CacheError, ProviderError
from domain.models.currency import RateCacheEntry, RateQuote, RateSource
from infrastructure.cache.base import RateCacheStore
from infrastructure.providers.base import ExchangeRateProvider

logger = logging.getLogger(__name__)

STATIC_FALLBACK_RATES: dict[tuple[str, str], Decimal] = {
    ('USD', 'INR'): Decimal('82.45'),
    ('USD', 'EUR'): Decimal('0.92'),
    ('USD', 'GBP'): Decimal('0.79'),
    ('USD', 'MXN'): Decimal('17.0'),
    ('USD', 'CAD'): Decimal('1.35'),
    ('EUR', 'USD'): Decimal('1.09'),
    ('GBP', 'USD'): Decimal('1.27'),
    ('INR', 'USD'): Decimal('0.012'),
    ('MXN', 'USD'): Decimal('0.059'),
}


@dataclass(frozen=True)
class RateHit:
    quote: RateQuote


@dataclass(frozen=True)
class RateMiss:
    tier: str
    reason: str


class RateStrategy(Protocol):
    tier: str

    async def resolve(
        self, from_currency: str, to_currency: str, now: datetime
    ) -> RateHit | RateMiss: ...


async def _read_cache(
    cache: RateCacheStore, from_currency: str, to_currency: str
) -> RateCacheEntry | None:
    try:
        return await cache.get_rate(from_currency, to_currency)
    except CacheError as e:
        logger.error(f'Cache read failed for {from_currency}->{to_currency}: {e}')
        return None


class FreshCacheStrategy:
    tier = 'fresh-cache'

    def __init__(self, cache: RateCacheStore, ttl: timedelta):
        self.cache = cache
        self.ttl = ttl

    async def resolve(self, from_currency: str, to_currency: str, now: datetime) -> RateHit | RateMiss:
        entry = await _read_cache(self.cache, from_currency, to_currency)
        if entry is None:
            return RateMiss(self.tier, 'no cached rate')
        if not entry.is_fresh(now, self.ttl):
            return RateMiss(self.tier, f'cached rate expired ({entry.age_minutes(now)} min old)')

        return RateHit(
            RateQuote(
                from_currency=from_currency,
                to_currency=to_currency,
                rate=entry.rate,
                source=RateSource.CACHE,
                fetched_at=entry.fetched_at,
            )
        )


class LiveProviderStrategy:
    tier = 'live-api'

    def __init__(
        self,
        provider: ExchangeRateProvider,
        cache: RateCacheStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.provider = provider
        self.cache = cache
        self.clock = clock

    async def resolve(self, from_currency: str, to_currency: str, now: datetime) -> RateHit | RateMiss:
        try:
            rate = await self.provider.fetch_rate(from_currency, to_currency)
        except ProviderError as e:
            logger.error(f'Provider {self.provider.name} failed for {from_currency}->{to_currency}: {e}')
            return RateMiss(self.tier, str(e))

        # stamped when the rate arrives, not when resolution started
        fetched_at = self.clock()

        try:
            await self.cache.set_rate(
                RateCacheEntry(
                    from_currency=from_currency,
                    to_currency=to_currency,
                    rate=rate,
                    fetched_at=fetched_at,
                )
            )
        except CacheError as e:
            logger.error(f'Cache write failed for {from_currency}->{to_currency}: {e}')
        logger.info(f'Provider {self.provider.name}: {from_currency}->{to_currency} = {rate}')

        return RateHit(
            RateQuote(
                from_currency=from_currency,
                to_currency=to_currency,
                rate=rate,
                source=RateSource.LIVE_API,
                fetched_at=fetched_at,
            )
        )


class StaleCacheStrategy:
    """Serves an expired cached rate. Reported to callers as a plain cache hit."""

    tier = 'stale-cache'

    def __init__(self, cache: RateCacheStore):
        self.cache = cache

    async def resolve(self, from_currency: str, to_currency: str, now: datetime) -> RateHit | RateMiss:
        entry = await _read_cache(self.cache, from_currency, to_currency)
        if entry is None:
            return RateMiss(self.tier, 'no cached rate')

        return RateHit(
            RateQuote(
                from_currency=from_currency,
                to_currency=to_currency,
                rate=entry.rate,
                source=RateSource.CACHE,
                fetched_at=entry.fetched_at,
                stale=True,
            )
        )


class StaticTableStrategy:
    tier = 'fallback-mock'

    def __init__(self, rates: dict[tuple[str, str], Decimal] = STATIC_FALLBACK_RATES):
        self.rates = rates

    async def resolve(self, from_currency: str, to_currency: str, now: datetime) -> RateHit | RateMiss:
        rate = self.rates.get((from_currency, to_currency))
        if rate is None:
            return RateMiss(self.tier, 'pair not in fallback table')

        return RateHit(
            RateQuote(
                from_currency=from_currency,
                to_currency=to_currency,
                rate=rate,
                source=RateSource.FALLBACK_MOCK,
                fetched_at=now,
            )
        )
