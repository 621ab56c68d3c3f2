"""Read-through history cache owned by the market-data adapter."""

import time
from typing import Callable, Protocol

from trend_signal.core.types import Candle


class HistoryCache(Protocol):
    """Candle history store keyed by symbol."""

    def get(self, symbol: str) -> tuple[Candle, ...] | None: ...

    def set(self, symbol: str, candles: tuple[Candle, ...]) -> None: ...


class InMemoryHistoryCache:
    """Process-local candle cache with a per-entry time-to-live.

    A TTL of zero disables caching entirely. Expired entries are swept on every
    write, and once ``max_entries`` symbols are held the oldest entry makes room
    for the new one.
    """

    def __init__(
        self,
        ttl_s: float,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 256,
    ) -> None:
        self.ttl_s = max(0.0, ttl_s)
        self.max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: dict[str, tuple[float, tuple[Candle, ...]]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, symbol: str) -> tuple[Candle, ...] | None:
        entry = self._entries.get(symbol)
        if entry is None:
            return None
        stored_at, candles = entry
        if self._clock() - stored_at >= self.ttl_s:
            self._entries.pop(symbol, None)
            return None
        return candles

    def set(self, symbol: str, candles: tuple[Candle, ...]) -> None:
        if self.ttl_s <= 0.0:
            return
        now = self._clock()
        self._sweep(now)
        self._entries.pop(symbol, None)
        while len(self._entries) >= self.max_entries:
            oldest = min(self._entries, key=lambda key: self._entries[key][0])
            del self._entries[oldest]
        self._entries[symbol] = (now, tuple(candles))

    def _sweep(self, now: float) -> None:
        expired = [
            symbol
            for symbol, (stored_at, _) in self._entries.items()
            if now - stored_at >= self.ttl_s
        ]
        for symbol in expired:
            del self._entries[symbol]
