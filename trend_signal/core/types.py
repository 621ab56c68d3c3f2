"""Shared immutable records passed between the adapter, the engine and the API."""

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Sequence

Trend = Literal["bullish", "bearish", "neutral"]
SignalStrength = Literal["STRONG", "VALID", "WEAK", "INVALID"]
SignalType = Literal["LONG", "SHORT", "HOLD", "NO_TRADE"]

BULLISH: Trend = "bullish"
BEARISH: Trend = "bearish"
NEUTRAL: Trend = "neutral"

DEFAULT_ORDERBOOK_RATIO = 1.0
DEFAULT_SENTIMENT = 0.5
DEFAULT_SENTIMENT_SOURCE = "neutral"


@dataclass(frozen=True, slots=True)
class ServiceMeta:
    """Metadata describing a running service instance."""

    name: str
    version: str
    env: str


@dataclass(frozen=True, slots=True)
class Candle:
    """Normalized closed candle produced by the market-data adapter."""

    timestamp_ms: int
    close: float
    volume: float
    open: float | None = None
    high: float | None = None
    low: float | None = None


@dataclass(frozen=True, slots=True)
class MarketSnapshot:
    """Everything the engine needs for one analysis, assembled before the call."""

    symbol: str
    closes: tuple[float, ...]
    volumes: tuple[float, ...]
    orderbook_ratio: float = DEFAULT_ORDERBOOK_RATIO
    sentiment: float = DEFAULT_SENTIMENT
    sentiment_source: str = DEFAULT_SENTIMENT_SOURCE

    @classmethod
    def from_candles(
        cls,
        symbol: str,
        candles: Sequence[Candle],
        orderbook_ratio: float = DEFAULT_ORDERBOOK_RATIO,
        sentiment: float = DEFAULT_SENTIMENT,
        sentiment_source: str = DEFAULT_SENTIMENT_SOURCE,
    ) -> "MarketSnapshot":
        """Build a snapshot from chronologically ordered candles."""

        return cls(
            symbol=symbol,
            closes=tuple(candle.close for candle in candles),
            volumes=tuple(candle.volume for candle in candles),
            orderbook_ratio=orderbook_ratio,
            sentiment=sentiment,
            sentiment_source=sentiment_source,
        )


@dataclass(frozen=True, slots=True)
class IndicatorResult:
    """Indicator values derived from one snapshot."""

    ema_short: float
    ema_long: float
    rsi: float
    volume_ratio: float
    volatility: float


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    """Trend label, weighted confidence and per-factor contributions."""

    trend: Trend
    confidence: float
    components: Mapping[str, float]


@dataclass(frozen=True, slots=True)
class SignalRecord:
    """Final analysis output for one symbol.

    Indicator fields keep full precision so the record can be re-evaluated;
    ``to_dict`` rounds them for presentation.
    """

    symbol: str
    trend: Trend
    confidence: float
    signal_strength: SignalStrength
    signal_type: SignalType
    rsi: float
    volume_ratio: float
    volatility: float
    orderbook_ratio: float
    sentiment: float
    sentiment_label: str
    horizons: Mapping[str, float]
    invalidated_if: tuple[str, ...]
    components: Mapping[str, float] = field(default_factory=dict)
    sentiment_source: str = DEFAULT_SENTIMENT_SOURCE

    def to_dict(self) -> dict[str, Any]:
        """Return the flat JSON payload served by the analyze endpoint."""

        return {
            "symbol": self.symbol,
            "trend": self.trend,
            "confidence": self.confidence,
            "signal_strength": self.signal_strength,
            "signal_type": self.signal_type,
            "rsi": round(self.rsi, 2),
            "volume_ratio": round(self.volume_ratio, 2),
            "volatility": round(self.volatility, 4),
            "orderbook_ratio": round(self.orderbook_ratio, 2),
            "sentiment": {
                "score": round(self.sentiment, 2),
                "label": self.sentiment_label,
                "source": self.sentiment_source,
            },
            "components": {name: round(value, 2) for name, value in self.components.items()},
            "horizons": dict(self.horizons),
            "invalidated_if": list(self.invalidated_if),
        }
