from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from infrastructure.cache.memory_cache import InMemoryRateCache


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 17, 9, 0, 0, tzinfo=UTC))


@pytest.fixture
def memory_cache():
    return InMemoryRateCache()


@pytest.fixture
def mock_provider():
    provider = AsyncMock()
    provider.name = 'exchangerate.host'
    provider.fetch_rate.return_value = Decimal('82.45')
    return provider
