import json
from datetime import datetime
from decimal import Decimal, InvalidOperation

from redis import asyncio as redis
from redis.exceptions import RedisError

from domain.exceptions.currency import CacheError
from domain.models.currency import RateCacheEntry


class RedisRateCache:
    KEY_PREFIX = "fxrate"

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    @property
    def backend(self) -> str:
        return "redis"

    def _make_rate_key(self, from_currency: str, to_currency: str) -> str:
        return f"{self.KEY_PREFIX}:{from_currency}:{to_currency}"

    async def get_rate(self, from_currency: str, to_currency: str) -> RateCacheEntry | None:
        key = self._make_rate_key(from_currency, to_currency)
        try:
            data = await self.redis.get(key)
        except RedisError as e:
            raise CacheError(f"Redis read failed for {key}: {e}") from e

        if not data:
            return None

        try:
            rate_dict = json.loads(data)
            return RateCacheEntry(
                from_currency=rate_dict["from_currency"],
                to_currency=rate_dict["to_currency"],
                rate=Decimal(rate_dict["rate"]),
                fetched_at=datetime.fromisoformat(rate_dict["fetched_at"]),
            )
        except json.JSONDecodeError as e:
            raise CacheError(f"Invalid json data under {key}") from e
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise CacheError(f"Malformed cache entry under {key}: {e}") from e

    async def set_rate(self, entry: RateCacheEntry) -> None:
        key = self._make_rate_key(entry.from_currency, entry.to_currency)

        rate_dict = {
            "from_currency": entry.from_currency,
            "to_currency": entry.to_currency,
            "rate": str(entry.rate),
            "fetched_at": entry.fetched_at.isoformat(),
        }

        # No Redis expiry: stale entries must survive for the fallback tier.
        try:
            await self.redis.set(key, json.dumps(rate_dict))
        except RedisError as e:
            raise CacheError(f"Redis write failed for {key}: {e}") from e

    async def _keys(self) -> list[str]:
        try:
            return [key async for key in self.redis.scan_iter(match=f"{self.KEY_PREFIX}:*")]
        except RedisError as e:
            raise CacheError(f"Redis scan failed: {e}") from e

    async def clear(self) -> int:
        keys = await self._keys()
        if not keys:
            return 0
        try:
            await self.redis.delete(*keys)
        except RedisError as e:
            raise CacheError(f"Redis delete failed: {e}") from e
        return len(keys)

    async def size(self) -> int:
        return len(await self._keys())
