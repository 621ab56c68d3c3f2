"""Rule-based invalidation of a scored trend."""

from trend_signal.core.types import BEARISH, BULLISH, Trend
from trend_signal.engine.params import InvalidationThresholds

LOW_VOLUME = "low volume"
RSI_OVERBOUGHT = "RSI overbought"
RSI_OVERSOLD = "RSI oversold"
SENTIMENT_CONTRADICTS = "sentiment contradicts trend"
ORDERBOOK_CONTRADICTS = "orderbook contradicts trend"


def evaluate_invalidations(
    trend: Trend,
    rsi: float,
    volume_ratio: float,
    sentiment: float,
    orderbook_ratio: float,
    thresholds: InvalidationThresholds,
) -> tuple[str, ...]:
    """Return every triggered reason in rule order, each reason at most once.

    All rules are evaluated; a triggered rule never hides another.
    """

    rules = (
        (volume_ratio < thresholds.volume_ratio_min, LOW_VOLUME),
        (trend == BULLISH and rsi > thresholds.rsi_overbought, RSI_OVERBOUGHT),
        (trend == BEARISH and rsi < thresholds.rsi_oversold, RSI_OVERSOLD),
        (trend == BULLISH and sentiment < thresholds.sentiment_bullish_floor, SENTIMENT_CONTRADICTS),
        (trend == BEARISH and sentiment > thresholds.sentiment_bearish_ceiling, SENTIMENT_CONTRADICTS),
        (
            (trend == BULLISH and orderbook_ratio < 1.0)
            or (trend == BEARISH and orderbook_ratio > 1.0),
            ORDERBOOK_CONTRADICTS,
        ),
    )

    reasons: list[str] = []
    for triggered, reason in rules:
        if triggered and reason not in reasons:
            reasons.append(reason)
    return tuple(reasons)
