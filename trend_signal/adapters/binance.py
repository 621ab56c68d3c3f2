"""Binance spot REST client for daily candles and order-book depth."""

import logging
from datetime import datetime
from typing import Any, Callable

import httpx

from trend_signal.core.errors import InvalidSymbolError, UpstreamUnavailableError
from trend_signal.core.time_utils import utc_now
from trend_signal.core.types import Candle

_SOURCE = "binance"
_INVALID_SYMBOL_CODE = -1121

logger = logging.getLogger(__name__)


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _build_candle(row: Any) -> Candle | None:
    if not isinstance(row, (list, tuple)) or len(row) < 6:
        return None

    close = _as_float(row[4])
    volume = _as_float(row[5])
    if close is None or volume is None:
        return None

    try:
        timestamp_ms = int(row[0])
    except (TypeError, ValueError):
        return None

    return Candle(
        timestamp_ms=timestamp_ms,
        open=_as_float(row[1]),
        high=_as_float(row[2]),
        low=_as_float(row[3]),
        close=close,
        volume=volume,
    )


def _close_time_ms(row: Any) -> int | None:
    if not isinstance(row, (list, tuple)) or len(row) < 7:
        return None
    try:
        return int(row[6])
    except (TypeError, ValueError):
        return None


def _sum_quantities(levels: Any) -> float:
    if not isinstance(levels, list):
        return 0.0
    total = 0.0
    for level in levels:
        if not isinstance(level, (list, tuple)) or len(level) < 2:
            continue
        quantity = _as_float(level[1])
        if quantity is not None:
            total += quantity
    return total


class BinanceRestClient:
    """Thin async wrapper over the public Binance spot endpoints."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._client = client
        self._clock = clock

    async def _get(self, endpoint: str, symbol: str, params: dict[str, Any]) -> Any:
        try:
            response = await self._client.get(endpoint, params=params)
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(_SOURCE, f"{endpoint}: {exc}") from exc

        if response.status_code == 400:
            code = None
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                code = body.get("code")
            if code == _INVALID_SYMBOL_CODE:
                raise InvalidSymbolError(symbol, "unknown symbol")

        if response.is_error:
            raise UpstreamUnavailableError(
                _SOURCE, f"{endpoint} returned HTTP {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamUnavailableError(_SOURCE, f"{endpoint} returned invalid JSON") from exc

    async def get_klines(self, symbol: str, interval: str, limit: int) -> tuple[Candle, ...]:
        """Fetch the most recent closed klines, oldest first.

        Binance appends the still-forming kline as the last row; its close time
        lies in the future, so it is dropped.
        """

        payload = await self._get(
            "/api/v3/klines",
            symbol,
            {"symbol": symbol, "interval": interval, "limit": limit},
        )
        if not isinstance(payload, list):
            raise UpstreamUnavailableError(_SOURCE, "klines payload is not a list")

        now_ms = int(self._clock().timestamp() * 1000)
        rows = list(payload)
        if rows:
            close_time = _close_time_ms(rows[-1])
            if close_time is not None and close_time > now_ms:
                rows.pop()

        candles: list[Candle] = []
        skipped = 0
        for row in rows:
            candle = _build_candle(row)
            if candle is None:
                skipped += 1
                continue
            candles.append(candle)

        if skipped:
            logger.warning("binance_klines_rows_skipped", extra={"symbol": symbol, "skipped": skipped})
        candles.sort(key=lambda candle: candle.timestamp_ms)
        return tuple(candles)

    async def get_orderbook_ratio(self, symbol: str, limit: int) -> float:
        """Return summed bid quantity over summed ask quantity for the top levels."""

        payload = await self._get("/api/v3/depth", symbol, {"symbol": symbol, "limit": limit})
        if not isinstance(payload, dict):
            raise UpstreamUnavailableError(_SOURCE, "depth payload is not an object")

        bids = _sum_quantities(payload.get("bids"))
        asks = _sum_quantities(payload.get("asks"))
        if asks <= 0.0:
            raise UpstreamUnavailableError(_SOURCE, "depth has no ask quantity")
        return bids / asks
