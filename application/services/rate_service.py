import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from application.services.rate_strategies import (
    FreshCacheStrategy,
    LiveProviderStrategy,
    RateHit,
    RateMiss,
    RateStrategy,
    StaleCacheStrategy,
    StaticTableStrategy,
)
from application.utils.time import utc_now
from domain.exceptions.currency import RateUnavailableError
from domain.models.currency import RateQuote
from infrastructure.cache.base import RateCacheStore
from infrastructure.monitoring.logger import log_rate_resolution
from infrastructure.providers.base import ExchangeRateProvider

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = timedelta(minutes=15)


def default_strategies(
    cache: RateCacheStore,
    provider: ExchangeRateProvider,
    ttl: timedelta = DEFAULT_CACHE_TTL,
    clock: Callable[[], datetime] = utc_now,
) -> list[RateStrategy]:
    """Resolution order: fresh cache, live provider, stale cache, static table."""
    return [
        FreshCacheStrategy(cache, ttl),
        LiveProviderStrategy(provider, cache, clock),
        StaleCacheStrategy(cache),
        StaticTableStrategy(),
    ]


class RateService:
    def __init__(
        self,
        cache: RateCacheStore,
        strategies: Sequence[RateStrategy],
        clock: Callable[[], datetime] = utc_now,
    ):
        self.cache = cache
        self.strategies = list(strategies)
        self.clock = clock

    async def get_rate(self, from_currency: str, to_currency: str) -> RateQuote:
        now = self.clock()
        misses: list[RateMiss] = []

        for strategy in self.strategies:
            outcome = await strategy.resolve(from_currency, to_currency, now)
            if isinstance(outcome, RateHit):
                quote = outcome.quote
                log_rate_resolution(
                    logger,
                    from_currency,
                    to_currency,
                    rate=quote.rate,
                    source=quote.source.value,
                    stale=quote.stale,
                    misses=[{'tier': m.tier, 'reason': m.reason} for m in misses],
                )
                return quote
            misses.append(outcome)

        logger.error(
            f'All rate tiers exhausted for {from_currency}->{to_currency}: '
            + '; '.join(f'{m.tier}: {m.reason}' for m in misses)
        )
        raise RateUnavailableError(from_currency, to_currency)

    async def clear_cache(self) -> int:
        cleared = await self.cache.clear()
        logger.info(f'Cleared {cleared} cached FX rates')
        return cleared
