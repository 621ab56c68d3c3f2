"""Trend detection and weighted confidence."""

import pytest

from trend_signal.core.types import IndicatorResult
from trend_signal.engine.params import ScoringWeights
from trend_signal.engine.scoring import determine_trend, label_sentiment, score


def _indicators(
    ema_short: float = 101.0,
    ema_long: float = 100.0,
    rsi: float = 50.0,
    volume_ratio: float = 1.0,
) -> IndicatorResult:
    return IndicatorResult(
        ema_short=ema_short,
        ema_long=ema_long,
        rsi=rsi,
        volume_ratio=volume_ratio,
        volatility=0.01,
    )


def test_trend_from_ema_comparison() -> None:
    """Only an exact tie between the EMAs is neutral."""

    assert determine_trend(101.0, 100.0) == "bullish"
    assert determine_trend(99.0, 100.0) == "bearish"
    assert determine_trend(100.0, 100.0) == "neutral"
    assert determine_trend(100.0 + 1e-12, 100.0) == "bullish"


def test_neutral_trend_scores_midpoint_factors() -> None:
    """Trend, RSI and order book fall back to 50 without a direction."""

    breakdown = score(
        _indicators(ema_short=100.0, ema_long=100.0, rsi=80.0),
        orderbook_ratio=3.0,
        sentiment=0.5,
        weights=ScoringWeights(),
    )
    assert breakdown.trend == "neutral"
    assert breakdown.components == {
        "trend": 20.0,
        "rsi": 10.0,
        "volume": 15.0,
        "orderbook": 7.5,
        "sentiment": 5.0,
    }
    assert breakdown.confidence == 57.5


def test_bullish_full_alignment_scores_hundred() -> None:
    """Every factor at its best yields the full weight total."""

    breakdown = score(_indicators(rsi=50.0), orderbook_ratio=1.2, sentiment=1.0, weights=ScoringWeights())
    assert breakdown.trend == "bullish"
    assert breakdown.confidence == 100.0


def test_rsi_score_penalizes_distance_from_fifty() -> None:
    """RSI 65 is 15 points from center and loses 30 points of score."""

    breakdown = score(_indicators(rsi=65.0), orderbook_ratio=1.0, sentiment=0.5, weights=ScoringWeights())
    assert breakdown.components["rsi"] == pytest.approx(70.0 * 20.0 / 100.0)


def test_rsi_score_floors_at_zero() -> None:
    """Extreme RSI cannot produce a negative contribution."""

    breakdown = score(_indicators(rsi=0.0), orderbook_ratio=1.0, sentiment=0.5, weights=ScoringWeights())
    assert breakdown.components["rsi"] == 0.0


def test_volume_score_is_capped() -> None:
    """A volume spike contributes at most the full volume weight."""

    breakdown = score(_indicators(volume_ratio=3.0), orderbook_ratio=1.0, sentiment=0.5, weights=ScoringWeights())
    assert breakdown.components["volume"] == 15.0


def test_orderbook_score_is_direction_aware() -> None:
    """Bid-heavy books support longs; ask-heavy books support shorts."""

    weights = ScoringWeights()
    bullish = score(_indicators(), orderbook_ratio=0.5, sentiment=0.5, weights=weights)
    bearish = score(_indicators(ema_short=99.0), orderbook_ratio=0.5, sentiment=0.5, weights=weights)
    bearish_against = score(_indicators(ema_short=99.0), orderbook_ratio=2.0, sentiment=0.5, weights=weights)

    assert bullish.components["orderbook"] == pytest.approx(50.0 * 15.0 / 100.0)
    assert bearish.components["orderbook"] == pytest.approx(15.0)
    assert bearish_against.components["orderbook"] == pytest.approx(50.0 * 15.0 / 100.0)


def test_confidence_clamped_under_extreme_weights() -> None:
    """Weights far from a 100 total still produce a confidence in [0, 100]."""

    heavy = ScoringWeights(trend=1000.0, rsi=500.0, volume=500.0, orderbook=500.0, sentiment=500.0)
    negative = ScoringWeights(trend=-1000.0, rsi=0.0, volume=0.0, orderbook=0.0, sentiment=0.0)

    assert score(_indicators(), 1.0, 0.5, heavy).confidence == 100.0
    assert score(_indicators(), 1.0, 0.5, negative).confidence == 0.0


def test_confidence_rounded_to_two_decimals() -> None:
    """Confidence is reported with two decimal places."""

    breakdown = score(_indicators(rsi=57.123), orderbook_ratio=1.0, sentiment=0.333, weights=ScoringWeights())
    assert breakdown.confidence == round(breakdown.confidence, 2)


def test_sentiment_labels() -> None:
    """Scores map onto five bands."""

    assert label_sentiment(0.1) == "bearish"
    assert label_sentiment(0.4) == "slightly bearish"
    assert label_sentiment(0.5) == "neutral"
    assert label_sentiment(0.6) == "slightly bullish"
    assert label_sentiment(0.65) == "bullish"
