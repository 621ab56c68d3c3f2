"""Pure analysis entry point: snapshot in, signal record out."""

import logging

from trend_signal.core.types import MarketSnapshot, SignalRecord
from trend_signal.engine.classifier import classify
from trend_signal.engine.horizons import project_horizons
from trend_signal.engine.indicators import compute_indicators
from trend_signal.engine.invalidation import evaluate_invalidations
from trend_signal.engine.params import DEFAULT_PARAMS, EngineParams
from trend_signal.engine.scoring import label_sentiment, score

logger = logging.getLogger(__name__)


def analyze(snapshot: MarketSnapshot, params: EngineParams = DEFAULT_PARAMS) -> SignalRecord:
    """Run indicators, scoring, invalidation, classification and projection.

    Raises ``InsufficientDataError`` before any stage runs when the snapshot
    is shorter than the longest configured window.
    """

    indicators = compute_indicators(snapshot, params.periods)
    breakdown = score(
        indicators,
        orderbook_ratio=snapshot.orderbook_ratio,
        sentiment=snapshot.sentiment,
        weights=params.weights,
    )
    reasons = evaluate_invalidations(
        trend=breakdown.trend,
        rsi=indicators.rsi,
        volume_ratio=indicators.volume_ratio,
        sentiment=snapshot.sentiment,
        orderbook_ratio=snapshot.orderbook_ratio,
        thresholds=params.invalidation,
    )
    strength, signal_type = classify(
        confidence=breakdown.confidence,
        invalidation_count=len(reasons),
        trend=breakdown.trend,
        thresholds=params.classifier,
    )

    record = SignalRecord(
        symbol=snapshot.symbol,
        trend=breakdown.trend,
        confidence=breakdown.confidence,
        signal_strength=strength,
        signal_type=signal_type,
        rsi=indicators.rsi,
        volume_ratio=indicators.volume_ratio,
        volatility=indicators.volatility,
        orderbook_ratio=snapshot.orderbook_ratio,
        sentiment=snapshot.sentiment,
        sentiment_label=label_sentiment(snapshot.sentiment),
        horizons=project_horizons(breakdown.confidence, breakdown.trend),
        invalidated_if=reasons,
        components=breakdown.components,
        sentiment_source=snapshot.sentiment_source,
    )
    logger.debug(
        "analysis_completed",
        extra={
            "symbol": record.symbol,
            "bars": len(snapshot.closes),
            "trend": record.trend,
            "confidence": record.confidence,
            "signal_strength": record.signal_strength,
            "invalidated_if": list(record.invalidated_if),
        },
    )
    return record
