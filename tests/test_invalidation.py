"""Invalidation rules run in a fixed order and never short-circuit."""

from trend_signal.engine.invalidation import evaluate_invalidations
from trend_signal.engine.params import InvalidationThresholds

_THRESHOLDS = InvalidationThresholds()


def test_clean_bullish_inputs_have_no_reasons() -> None:
    """Healthy volume, mid RSI, neutral sentiment and a bid-heavy book pass."""

    assert evaluate_invalidations("bullish", 55.0, 1.0, 0.5, 1.1, _THRESHOLDS) == ()


def test_every_bullish_rule_is_reported_in_order() -> None:
    """All four applicable rules fire together."""

    reasons = evaluate_invalidations("bullish", 75.0, 0.5, 0.2, 0.8, _THRESHOLDS)
    assert reasons == (
        "low volume",
        "RSI overbought",
        "sentiment contradicts trend",
        "orderbook contradicts trend",
    )


def test_every_bearish_rule_is_reported_in_order() -> None:
    """Bearish mirrors use the oversold and ceiling thresholds."""

    reasons = evaluate_invalidations("bearish", 25.0, 0.1, 0.8, 1.2, _THRESHOLDS)
    assert reasons == (
        "low volume",
        "RSI oversold",
        "sentiment contradicts trend",
        "orderbook contradicts trend",
    )


def test_neutral_trend_only_checks_volume() -> None:
    """Direction-dependent rules do not apply without a trend."""

    assert evaluate_invalidations("neutral", 95.0, 1.0, 0.0, 5.0, _THRESHOLDS) == ()
    assert evaluate_invalidations("neutral", 50.0, 0.59, 0.5, 1.0, _THRESHOLDS) == ("low volume",)


def test_thresholds_are_strict() -> None:
    """Values sitting exactly on a threshold do not trigger."""

    assert evaluate_invalidations("bullish", 70.0, 0.6, 0.35, 1.0, _THRESHOLDS) == ()
    assert evaluate_invalidations("bearish", 30.0, 0.6, 0.65, 1.0, _THRESHOLDS) == ()


def test_adding_a_trigger_keeps_existing_reasons() -> None:
    """A newly triggered rule only extends the set."""

    before = evaluate_invalidations("bullish", 75.0, 1.0, 0.5, 1.0, _THRESHOLDS)
    after = evaluate_invalidations("bullish", 75.0, 0.4, 0.5, 1.0, _THRESHOLDS)
    assert set(before) <= set(after)
    assert len(after) == len(before) + 1


def test_custom_thresholds_are_honoured() -> None:
    """Thresholds come from configuration, not constants."""

    strict = InvalidationThresholds(volume_ratio_min=1.5, rsi_overbought=60.0)
    assert evaluate_invalidations("bullish", 65.0, 1.0, 0.5, 1.0, strict) == (
        "low volume",
        "RSI overbought",
    )
