"""Tunable engine parameters, grouped by the stage that consumes them."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class IndicatorPeriods:
    """Lookback lengths for every indicator the engine computes."""

    short_ema: int = 10
    long_ema: int = 50
    rsi: int = 14
    volume_window: int = 30
    volatility_window: int = 14

    @property
    def required_window(self) -> int:
        """Shortest series that satisfies every indicator."""

        return max(
            self.short_ema,
            self.long_ema,
            self.rsi + 1,
            self.volume_window,
            self.volatility_window + 1,
        )


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    """Relative weight of each confidence factor, nominally summing to 100."""

    trend: float = 40.0
    rsi: float = 20.0
    volume: float = 15.0
    orderbook: float = 15.0
    sentiment: float = 10.0

    def as_dict(self) -> dict[str, float]:
        return {
            "trend": self.trend,
            "rsi": self.rsi,
            "volume": self.volume,
            "orderbook": self.orderbook,
            "sentiment": self.sentiment,
        }

    def total(self) -> float:
        return sum(self.as_dict().values())


@dataclass(frozen=True, slots=True)
class InvalidationThresholds:
    volume_ratio_min: float = 0.6
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0
    sentiment_bullish_floor: float = 0.35
    sentiment_bearish_ceiling: float = 0.65


@dataclass(frozen=True, slots=True)
class ClassifierThresholds:
    strong_confidence: float = 70.0
    valid_confidence: float = 45.0


@dataclass(frozen=True, slots=True)
class EngineParams:
    """Complete parameter set for one ``analyze`` call."""

    periods: IndicatorPeriods = field(default_factory=IndicatorPeriods)
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    invalidation: InvalidationThresholds = field(default_factory=InvalidationThresholds)
    classifier: ClassifierThresholds = field(default_factory=ClassifierThresholds)


DEFAULT_PARAMS = EngineParams()
