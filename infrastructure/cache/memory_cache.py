from domain.models.currency import RateCacheEntry


class InMemoryRateCache:
    def __init__(self):
        self._entries: dict[tuple[str, str], RateCacheEntry] = {}

    @property
    def backend(self) -> str:
        return 'memory'

    async def get_rate(self, from_currency: str, to_currency: str) -> RateCacheEntry | None:
        return self._entries.get((from_currency, to_currency))

    async def set_rate(self, entry: RateCacheEntry) -> None:
        self._entries[(entry.from_currency, entry.to_currency)] = entry

    async def clear(self) -> int:
        cleared = len(self._entries)
        self._entries.clear()
        return cleared

    async def size(self) -> int:
        return len(self._entries)
