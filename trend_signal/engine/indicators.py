"""Stateless indicator math over chronologically ordered series."""

import math
from typing import Sequence

from trend_signal.core.errors import InsufficientDataError
from trend_signal.core.types import IndicatorResult, MarketSnapshot
from trend_signal.engine.params import IndicatorPeriods


def _require(values: Sequence[float], required: int, what: str) -> None:
    if len(values) < required:
        raise InsufficientDataError(required=required, available=len(values), what=what)


def _require_period(period: int, what: str) -> None:
    if period <= 0:
        raise ValueError(f"{what} period must be positive, got {period}")


def _mean(values: Sequence[float]) -> float:
    # anchored on the first value so a flat window averages to exactly that value
    anchor = values[0]
    return anchor + math.fsum(value - anchor for value in values) / float(len(values))


def ema(values: Sequence[float], period: int) -> float:
    """Exponential moving average seeded with the SMA of the first ``period`` values."""

    _require_period(period, "ema")
    _require(values, period, f"ema_{period}")

    alpha = 2.0 / (period + 1.0)
    ema_value = _mean(values[:period])
    for value in values[period:]:
        ema_value += alpha * (value - ema_value)
    return ema_value


def rsi(values: Sequence[float], period: int = 14) -> float:
    """Wilder-smoothed relative strength index in [0, 100].

    The first averages are plain means over the first ``period`` differences;
    every later difference is folded in with ``(avg * (period - 1) + x) / period``.
    A series with neither gains nor losses reads 50.
    """

    _require_period(period, "rsi")
    _require(values, period + 1, f"rsi_{period}")

    gains: list[float] = []
    losses: list[float] = []
    for idx in range(1, len(values)):
        diff = values[idx] - values[idx - 1]
        gains.append(diff if diff > 0.0 else 0.0)
        losses.append(-diff if diff < 0.0 else 0.0)

    avg_gain = sum(gains[:period]) / float(period)
    avg_loss = sum(losses[:period]) / float(period)
    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = ((avg_gain * (period - 1)) + gain) / float(period)
        avg_loss = ((avg_loss * (period - 1)) + loss) / float(period)

    if avg_loss == 0.0 and avg_gain == 0.0:
        return 50.0
    if avg_loss == 0.0:
        return 100.0
    if avg_gain == 0.0:
        return 0.0
    return 100.0 - (100.0 / (1.0 + (avg_gain / avg_loss)))


def rolling_average(values: Sequence[float], window: int) -> float:
    """Arithmetic mean of the trailing ``window`` values."""

    _require_period(window, "rolling_average")
    _require(values, window, f"rolling_average_{window}")
    return _mean(values[-window:])


def volatility(values: Sequence[float], window: int) -> float:
    """Mean absolute relative change over the trailing ``window`` steps."""

    _require_period(window, "volatility")
    _require(values, window + 1, f"volatility_{window}")

    tail = values[-(window + 1):]
    changes = [
        abs(current - previous) / previous
        for previous, current in zip(tail, tail[1:])
        if previous != 0.0
    ]
    if not changes:
        return 0.0
    return sum(changes) / float(len(changes))


def volume_ratio(volumes: Sequence[float], window: int) -> float:
    """Latest volume relative to its trailing average; 0.0 on an all-zero window."""

    average = rolling_average(volumes, window)
    if average == 0.0:
        return 0.0
    return volumes[-1] / average


def compute_indicators(snapshot: MarketSnapshot, periods: IndicatorPeriods) -> IndicatorResult:
    """Compute every indicator for a snapshot, refusing truncated windows."""

    closes = snapshot.closes
    volumes = snapshot.volumes
    if len(closes) != len(volumes):
        raise InsufficientDataError(
            required=len(closes),
            available=len(volumes),
            what="volumes aligned with closes",
        )
    _require(closes, periods.required_window, "closes")

    return IndicatorResult(
        ema_short=ema(closes, periods.short_ema),
        ema_long=ema(closes, periods.long_ema),
        rsi=rsi(closes, periods.rsi),
        volume_ratio=volume_ratio(volumes, periods.volume_window),
        volatility=volatility(closes, periods.volatility_window),
    )
