"""Trend detection and weighted multi-factor confidence scoring."""

from trend_signal.core.types import BEARISH, BULLISH, NEUTRAL, IndicatorResult, ScoreBreakdown, Trend
from trend_signal.engine.params import ScoringWeights

_NEUTRAL_SCORE = 50.0


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def determine_trend(ema_short: float, ema_long: float) -> Trend:
    """Classify direction from the EMA pair; only an exact tie is neutral."""

    if ema_short > ema_long:
        return BULLISH
    if ema_short < ema_long:
        return BEARISH
    return NEUTRAL


def _rsi_score(rsi: float, trend: Trend) -> float:
    if trend == NEUTRAL:
        return _NEUTRAL_SCORE
    return max(0.0, 100.0 - abs(50.0 - rsi) * 2.0)


def _orderbook_score(orderbook_ratio: float, trend: Trend) -> float:
    # bid/ask for longs, ask/bid for shorts
    if trend == BULLISH:
        return _clamp(orderbook_ratio * 100.0)
    if trend == BEARISH:
        if orderbook_ratio <= 0.0:
            return 100.0
        return _clamp(100.0 / orderbook_ratio)
    return _NEUTRAL_SCORE


def score(
    indicators: IndicatorResult,
    orderbook_ratio: float,
    sentiment: float,
    weights: ScoringWeights,
) -> ScoreBreakdown:
    """Combine sub-scores on [0, 100] into a clamped, weighted confidence."""

    trend = determine_trend(indicators.ema_short, indicators.ema_long)
    subscores = {
        "trend": _NEUTRAL_SCORE if trend == NEUTRAL else 100.0,
        "rsi": _rsi_score(indicators.rsi, trend),
        "volume": _clamp(indicators.volume_ratio * 100.0),
        "orderbook": _orderbook_score(orderbook_ratio, trend),
        "sentiment": _clamp(sentiment * 100.0),
    }

    components = {
        name: subscores[name] * weight / 100.0
        for name, weight in weights.as_dict().items()
    }
    confidence = round(_clamp(sum(components.values())), 2)
    return ScoreBreakdown(trend=trend, confidence=confidence, components=components)


def label_sentiment(score_value: float) -> str:
    """Human-readable band for a sentiment score in [0, 1]."""

    if score_value < 0.35:
        return "bearish"
    if score_value < 0.45:
        return "slightly bearish"
    if score_value < 0.55:
        return "neutral"
    if score_value < 0.65:
        return "slightly bullish"
    return "bullish"
