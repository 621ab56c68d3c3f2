"""Environment-driven settings for the analysis service and engine parameters."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trend_signal.engine.params import (
    ClassifierThresholds,
    EngineParams,
    IndicatorPeriods,
    InvalidationThresholds,
    ScoringWeights,
)

_SENTIMENT_SOURCES = ("neutral", "news")


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a local .env file."""

    APP_NAME: str = "Trend Signal"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    VERSION: str = "0.1.0"
    HOST: str = "0.0.0.0"
    PORT: int = 10000

    BINANCE_REST_URL: str = "https://api.binance.com"
    KLINE_INTERVAL: str = "1d"
    KLINE_LIMIT: int = Field(default=365, ge=1, le=1000)
    ORDERBOOK_ENABLED: bool = True
    ORDERBOOK_DEPTH: int = Field(default=100, ge=5, le=5000)
    HTTP_TIMEOUT_S: float = Field(default=8.0, gt=0.0)
    HISTORY_CACHE_TTL_S: float = Field(default=300.0, ge=0.0)
    HISTORY_CACHE_MAX_ENTRIES: int = Field(default=256, ge=1)
    SENTIMENT_SOURCE: str = "neutral"
    CRYPTOPANIC_URL: str = "https://cryptopanic.com/api/v1/posts/"
    CRYPTOPANIC_TOKEN: str = ""
    SENTIMENT_NEWS_LIMIT: int = Field(default=20, ge=1)

    SHORT_EMA_PERIOD: int = Field(default=10, ge=1)
    LONG_EMA_PERIOD: int = Field(default=50, ge=1)
    RSI_PERIOD: int = Field(default=14, ge=1)
    VOLUME_WINDOW: int = Field(default=30, ge=1)
    VOLATILITY_WINDOW: int = Field(default=14, ge=1)

    TREND_WEIGHT: float = Field(default=40.0, ge=0.0)
    RSI_WEIGHT: float = Field(default=20.0, ge=0.0)
    VOLUME_WEIGHT: float = Field(default=15.0, ge=0.0)
    ORDERBOOK_WEIGHT: float = Field(default=15.0, ge=0.0)
    SENTIMENT_WEIGHT: float = Field(default=10.0, ge=0.0)

    VOLUME_RATIO_MIN: float = 0.6
    RSI_OVERBOUGHT: float = 70.0
    RSI_OVERSOLD: float = 30.0
    SENTIMENT_BULLISH_FLOOR: float = 0.35
    SENTIMENT_BEARISH_CEILING: float = 0.65

    STRONG_CONFIDENCE: float = 70.0
    VALID_CONFIDENCE: float = 45.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_consistency(self) -> "Settings":
        if self.SHORT_EMA_PERIOD >= self.LONG_EMA_PERIOD:
            raise ValueError("SHORT_EMA_PERIOD must be shorter than LONG_EMA_PERIOD")
        if self.VALID_CONFIDENCE > self.STRONG_CONFIDENCE:
            raise ValueError("VALID_CONFIDENCE must not exceed STRONG_CONFIDENCE")
        if self.sentiment_source() not in _SENTIMENT_SOURCES:
            raise ValueError(f"SENTIMENT_SOURCE must be one of {_SENTIMENT_SOURCES}")
        # one extra row for the still-forming kline the client drops
        required = self.engine_params().periods.required_window + 1
        if self.KLINE_LIMIT < required:
            raise ValueError(f"KLINE_LIMIT must be at least {required} to fill the longest indicator window")
        return self

    def sentiment_source(self) -> str:
        """Return the normalized sentiment provider name."""

        return self.SENTIMENT_SOURCE.strip().lower()

    def weights_total(self) -> float:
        """Return the sum of configured scoring weights."""

        return self.engine_params().weights.total()

    def engine_params(self) -> EngineParams:
        """Build the immutable parameter set handed to ``analyze``."""

        return EngineParams(
            periods=IndicatorPeriods(
                short_ema=self.SHORT_EMA_PERIOD,
                long_ema=self.LONG_EMA_PERIOD,
                rsi=self.RSI_PERIOD,
                volume_window=self.VOLUME_WINDOW,
                volatility_window=self.VOLATILITY_WINDOW,
            ),
            weights=ScoringWeights(
                trend=self.TREND_WEIGHT,
                rsi=self.RSI_WEIGHT,
                volume=self.VOLUME_WEIGHT,
                orderbook=self.ORDERBOOK_WEIGHT,
                sentiment=self.SENTIMENT_WEIGHT,
            ),
            invalidation=InvalidationThresholds(
                volume_ratio_min=self.VOLUME_RATIO_MIN,
                rsi_overbought=self.RSI_OVERBOUGHT,
                rsi_oversold=self.RSI_OVERSOLD,
                sentiment_bullish_floor=self.SENTIMENT_BULLISH_FLOOR,
                sentiment_bearish_ceiling=self.SENTIMENT_BEARISH_CEILING,
            ),
            classifier=ClassifierThresholds(
                strong_confidence=self.STRONG_CONFIDENCE,
                valid_confidence=self.VALID_CONFIDENCE,
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings to avoid repeated environment parsing."""

    return Settings()
