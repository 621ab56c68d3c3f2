"""Priority-ordered decision table mapping a scored trend to a tradeable signal."""

from trend_signal.core.types import BEARISH, BULLISH, SignalStrength, SignalType, Trend
from trend_signal.engine.params import ClassifierThresholds


def _trend_aligned(trend: Trend) -> SignalType:
    if trend == BULLISH:
        return "LONG"
    if trend == BEARISH:
        return "SHORT"
    return "HOLD"


def classify(
    confidence: float,
    invalidation_count: int,
    trend: Trend,
    thresholds: ClassifierThresholds,
) -> tuple[SignalStrength, SignalType]:
    """Return ``(signal_strength, signal_type)``; the first matching row wins.

    Boundary values belong to the higher-priority row, so a confidence equal
    to the strong threshold is STRONG and one equal to the valid threshold is
    VALID.
    """

    if invalidation_count > 0:
        return "INVALID", "NO_TRADE"
    if confidence >= thresholds.strong_confidence:
        return "STRONG", _trend_aligned(trend)
    if confidence >= thresholds.valid_confidence:
        return "VALID", _trend_aligned(trend)
    return "WEAK", "HOLD"
