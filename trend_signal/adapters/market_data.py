"""Assemble a MarketSnapshot from candles, order book and sentiment sources."""

import asyncio
import logging
import re
from typing import Protocol

from trend_signal.adapters.cache import HistoryCache
from trend_signal.adapters.sentiment import SentimentProvider
from trend_signal.core.errors import InvalidSymbolError, UpstreamUnavailableError
from trend_signal.core.time_utils import ms_to_utc, utc_now
from trend_signal.core.types import DEFAULT_ORDERBOOK_RATIO, DEFAULT_SENTIMENT, Candle, MarketSnapshot

_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9]{3,20}$")
SENTIMENT_UNAVAILABLE = "unavailable"

logger = logging.getLogger(__name__)


class MarketDataClient(Protocol):
    async def get_klines(self, symbol: str, interval: str, limit: int) -> tuple[Candle, ...]: ...

    async def get_orderbook_ratio(self, symbol: str, limit: int) -> float: ...


def normalize_symbol(raw: str | None) -> str:
    """Upper-case and validate a user-supplied symbol."""

    symbol = (raw or "").strip().upper()
    if not symbol:
        raise InvalidSymbolError("", "missing symbol")
    if not _SYMBOL_PATTERN.match(symbol):
        raise InvalidSymbolError(symbol)
    return symbol


class MarketDataAdapter:
    """Builds snapshots for the engine; all network suspension happens here.

    Candle failures propagate to the caller. The order book and sentiment are
    auxiliary: when unavailable they fall back to their neutral defaults.
    """

    def __init__(
        self,
        client: MarketDataClient,
        cache: HistoryCache,
        sentiment: SentimentProvider,
        interval: str = "1d",
        limit: int = 365,
        orderbook_enabled: bool = True,
        orderbook_depth: int = 100,
    ) -> None:
        self.client = client
        self.cache = cache
        self.sentiment = sentiment
        self.interval = interval
        self.limit = limit
        self.orderbook_enabled = orderbook_enabled
        self.orderbook_depth = orderbook_depth

    async def candles(self, symbol: str) -> tuple[Candle, ...]:
        cached = self.cache.get(symbol)
        if cached is not None:
            logger.debug("history_cache_hit", extra={"symbol": symbol, "bars": len(cached)})
            return cached

        candles = await self.client.get_klines(symbol, self.interval, self.limit)
        self.cache.set(symbol, candles)
        return candles

    async def orderbook_ratio(self, symbol: str) -> float:
        if not self.orderbook_enabled:
            return DEFAULT_ORDERBOOK_RATIO
        try:
            return await self.client.get_orderbook_ratio(symbol, self.orderbook_depth)
        except UpstreamUnavailableError as exc:
            logger.warning("orderbook_unavailable", extra={"symbol": symbol, "error": str(exc)})
            return DEFAULT_ORDERBOOK_RATIO

    async def sentiment_score(self, symbol: str, candles: tuple[Candle, ...]) -> tuple[float, str]:
        """Return the clamped score and the name of the source that produced it."""

        at = ms_to_utc(candles[-1].timestamp_ms) if candles else utc_now()
        try:
            value = await self.sentiment.score(symbol, at)
        except UpstreamUnavailableError as exc:
            logger.warning("sentiment_unavailable", extra={"symbol": symbol, "error": str(exc)})
            return DEFAULT_SENTIMENT, SENTIMENT_UNAVAILABLE
        return max(0.0, min(1.0, value)), self.sentiment.name

    async def build_snapshot(self, raw_symbol: str | None) -> MarketSnapshot:
        """Validate the symbol and gather every input the engine consumes."""

        symbol = normalize_symbol(raw_symbol)
        candles = await self.candles(symbol)
        orderbook_ratio, (sentiment, sentiment_source) = await asyncio.gather(
            self.orderbook_ratio(symbol),
            self.sentiment_score(symbol, candles),
        )
        return MarketSnapshot.from_candles(
            symbol,
            candles,
            orderbook_ratio=orderbook_ratio,
            sentiment=sentiment,
            sentiment_source=sentiment_source,
        )
