"""Forward confidence estimates for fixed horizons."""

from trend_signal.core.types import BULLISH, Trend

_SHORT_HORIZON_ADJUSTMENT = 5.0
_LONG_HORIZON_DECAY = 10.0


def _clamp(value: float) -> float:
    return round(max(0.0, min(100.0, value)), 2)


def project_horizons(confidence: float, trend: Trend) -> dict[str, float]:
    """Project 7d, 30d and 90d confidence from the base confidence."""

    short_adjustment = _SHORT_HORIZON_ADJUSTMENT if trend == BULLISH else -_SHORT_HORIZON_ADJUSTMENT
    return {
        "7d": _clamp(confidence + short_adjustment),
        "30d": _clamp(confidence),
        "90d": _clamp(confidence - _LONG_HORIZON_DECAY),
    }
