from typing import Protocol

from domain.models.currency import RateCacheEntry


class RateCacheStore(Protocol):
    """Ordered currency pair -> last successfully fetched rate.

    Entries are overwritten on write and only removed by ``clear``; expiry is
    decided by the reader, so implementations must keep stale entries.
    """

    @property
    def backend(self) -> str: ...

    async def get_rate(self, from_currency: str, to_currency: str) -> RateCacheEntry | None: ...

    async def set_rate(self, entry: RateCacheEntry) -> None: ...

    async def clear(self) -> int: ...

    async def size(self) -> int: ...
