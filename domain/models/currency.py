from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum


class RateSource(str, Enum):
    CACHE = 'cache'
    LIVE_API = 'live-api'
    FALLBACK_MOCK = 'fallback-mock'


@dataclass(frozen=True)
class SupportedCurrency:
    code: str
    name: str
    symbol: str


@dataclass(frozen=True)
class ConversionRequest:
    from_currency: str
    to_currency: str
    amount: Decimal


@dataclass(frozen=True)
class RateCacheEntry:
    from_currency: str
    to_currency: str
    rate: Decimal  # target units per 1 source unit
    fetched_at: datetime

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        return now - self.fetched_at < ttl

    def age_minutes(self, now: datetime) -> int:
        return int((now - self.fetched_at).total_seconds() // 60)


@dataclass(frozen=True)
class RateQuote:
    from_currency: str
    to_currency: str
    rate: Decimal
    source: RateSource
    fetched_at: datetime
    stale: bool = False  # never reported to callers

    @property
    def cache_hit(self) -> bool:
        return self.source is RateSource.CACHE


@dataclass(frozen=True)
class ConversionFees:
    fixed: Decimal
    percentage: Decimal
    total: Decimal
    total_in_target_currency: Decimal


@dataclass(frozen=True)
class ConversionAmounts:
    """Rounded output of the fee calculator, before provenance is attached."""

    from_amount: Decimal
    to_amount: Decimal
    fx_rate: Decimal
    fees: ConversionFees
    final_amount: Decimal


@dataclass(frozen=True)
class ConversionMetadata:
    cache_hit: bool
    source: RateSource
    timestamp: datetime


@dataclass(frozen=True)
class ConversionResult:
    from_currency: str
    to_currency: str
    amounts: ConversionAmounts
    metadata: ConversionMetadata
