from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from application.services.rate_strategies import (
    FreshCacheStrategy,
    LiveProviderStrategy,
    RateHit,
    RateMiss,
    StaleCacheStrategy,
    StaticTableStrategy,
)
from domain.exceptions.currency import CacheError, ProviderError, ProviderTimeoutError
from domain.models.currency import RateCacheEntry, RateSource

TTL = timedelta(minutes=15)


async def _seed(cache, now, rate='82.45', age=timedelta(0)):
    await cache.set_rate(RateCacheEntry('USD', 'INR', Decimal(rate), now - age))


class TestFreshCacheStrategy:
    @pytest.mark.asyncio
    async def test_hit_within_ttl(self, memory_cache, clock):
        await _seed(memory_cache, clock.now, age=timedelta(minutes=14, seconds=59))

        outcome = await FreshCacheStrategy(memory_cache, TTL).resolve('USD', 'INR', clock.now)

        assert isinstance(outcome, RateHit)
        assert outcome.quote.source is RateSource.CACHE
        assert outcome.quote.rate == Decimal('82.45')
        assert outcome.quote.stale is False

    @pytest.mark.asyncio
    async def test_miss_at_exactly_ttl(self, memory_cache, clock):
        await _seed(memory_cache, clock.now, age=TTL)

        outcome = await FreshCacheStrategy(memory_cache, TTL).resolve('USD', 'INR', clock.now)

        assert isinstance(outcome, RateMiss)
        assert 'expired' in outcome.reason

    @pytest.mark.asyncio
    async def test_miss_when_empty(self, memory_cache, clock):
        outcome = await FreshCacheStrategy(memory_cache, TTL).resolve('USD', 'INR', clock.now)

        assert outcome == RateMiss('fresh-cache', 'no cached rate')

    @pytest.mark.asyncio
    async def test_cache_error_is_a_miss(self, clock):
        broken_cache = AsyncMock()
        broken_cache.get_rate.side_effect = CacheError('Invalid json data under fxrate:USD:INR')

        outcome = await FreshCacheStrategy(broken_cache, TTL).resolve('USD', 'INR', clock.now)

        assert isinstance(outcome, RateMiss)


class TestLiveProviderStrategy:
    @pytest.mark.asyncio
    async def test_success_caches_and_returns_live_quote(self, memory_cache, mock_provider, clock):
        outcome = await LiveProviderStrategy(mock_provider, memory_cache, clock).resolve('USD', 'INR', clock.now)

        assert isinstance(outcome, RateHit)
        assert outcome.quote.source is RateSource.LIVE_API
        assert outcome.quote.cache_hit is False
        mock_provider.fetch_rate.assert_awaited_once_with('USD', 'INR')

        entry = await memory_cache.get_rate('USD', 'INR')
        assert entry.rate == Decimal('82.45')
        assert entry.fetched_at == clock.now

    @pytest.mark.asyncio
    async def test_success_overwrites_existing_entry(self, memory_cache, mock_provider, clock):
        await _seed(memory_cache, clock.now, rate='80.00', age=timedelta(hours=2))

        await LiveProviderStrategy(mock_provider, memory_cache, clock).resolve('USD', 'INR', clock.now)

        entry = await memory_cache.get_rate('USD', 'INR')
        assert entry.rate == Decimal('82.45')
        assert entry.fetched_at == clock.now

    @pytest.mark.asyncio
    async def test_entry_stamped_when_slow_fetch_returns(self, memory_cache, mock_provider, clock):
        started = clock.now

        async def slow_fetch(from_currency, to_currency):
            clock.advance(seconds=9)
            return Decimal('82.45')

        mock_provider.fetch_rate.side_effect = slow_fetch

        outcome = await LiveProviderStrategy(mock_provider, memory_cache, clock).resolve('USD', 'INR', started)

        entry = await memory_cache.get_rate('USD', 'INR')
        assert entry.fetched_at == started + timedelta(seconds=9)
        assert outcome.quote.fetched_at == entry.fetched_at

    @pytest.mark.asyncio
    @pytest.mark.parametrize('error', [
        ProviderError('Exchange rate API error: API returned unsuccessful response'),
        ProviderTimeoutError('Exchange rate request timed out: ReadTimeout'),
    ])
    async def test_provider_failure_is_a_miss(self, memory_cache, mock_provider, clock, error):
        mock_provider.fetch_rate.side_effect = error

        outcome = await LiveProviderStrategy(mock_provider, memory_cache, clock).resolve('USD', 'INR', clock.now)

        assert isinstance(outcome, RateMiss)
        assert outcome.tier == 'live-api'
        assert await memory_cache.size() == 0
        mock_provider.fetch_rate.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cache_write_failure_still_returns_live_rate(self, mock_provider, clock):
        broken_cache = AsyncMock()
        broken_cache.set_rate.side_effect = CacheError('Redis write failed')

        outcome = await LiveProviderStrategy(mock_provider, broken_cache, clock).resolve('USD', 'INR', clock.now)

        assert isinstance(outcome, RateHit)
        assert outcome.quote.rate == Decimal('82.45')


class TestStaleCacheStrategy:
    @pytest.mark.asyncio
    async def test_serves_expired_entry_as_cache(self, memory_cache, clock):
        await _seed(memory_cache, clock.now, rate='81.00', age=timedelta(days=3))

        outcome = await StaleCacheStrategy(memory_cache).resolve('USD', 'INR', clock.now)

        assert isinstance(outcome, RateHit)
        assert outcome.quote.rate == Decimal('81.00')
        assert outcome.quote.source is RateSource.CACHE
        assert outcome.quote.cache_hit is True
        assert outcome.quote.stale is True

    @pytest.mark.asyncio
    async def test_miss_when_empty(self, memory_cache, clock):
        outcome = await StaleCacheStrategy(memory_cache).resolve('USD', 'INR', clock.now)
        assert isinstance(outcome, RateMiss)


class TestStaticTableStrategy:
    @pytest.mark.asyncio
    @pytest.mark.parametrize('pair, rate', [
        (('USD', 'INR'), '82.45'),
        (('USD', 'EUR'), '0.92'),
        (('USD', 'GBP'), '0.79'),
        (('USD', 'MXN'), '17.0'),
        (('USD', 'CAD'), '1.35'),
        (('EUR', 'USD'), '1.09'),
        (('GBP', 'USD'), '1.27'),
        (('INR', 'USD'), '0.012'),
        (('MXN', 'USD'), '0.059'),
    ])
    async def test_known_pairs(self, clock, pair, rate):
        outcome = await StaticTableStrategy().resolve(*pair, clock.now)

        assert isinstance(outcome, RateHit)
        assert outcome.quote.rate == Decimal(rate)
        assert outcome.quote.source is RateSource.FALLBACK_MOCK

    @pytest.mark.asyncio
    async def test_unknown_pair_is_a_miss(self, clock):
        outcome = await StaticTableStrategy().resolve('JPY', 'CHF', clock.now)
        assert isinstance(outcome, RateMiss)

    @pytest.mark.asyncio
    async def test_reverse_of_known_pair_is_not_inferred(self, clock):
        outcome = await StaticTableStrategy().resolve('EUR', 'GBP', clock.now)
        assert isinstance(outcome, RateMiss)
