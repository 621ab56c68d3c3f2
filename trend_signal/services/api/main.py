"""FastAPI service exposing the signal engine over GET /analyze."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

import httpx
from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from trend_signal.adapters.binance import BinanceRestClient
from trend_signal.adapters.cache import InMemoryHistoryCache
from trend_signal.adapters.market_data import MarketDataAdapter
from trend_signal.adapters.sentiment import (
    NeutralSentimentProvider,
    NewsVoteSentimentProvider,
    SentimentProvider,
)
from trend_signal.core.config import Settings, get_settings
from trend_signal.core.errors import (
    InsufficientDataError,
    InvalidSymbolError,
    UpstreamUnavailableError,
)
from trend_signal.core.logging import configure_logging
from trend_signal.core.types import ServiceMeta
from trend_signal.engine.analyzer import analyze
from trend_signal.engine.params import EngineParams

settings = get_settings()
configure_logging(settings.LOG_LEVEL, service="api")
logger = logging.getLogger(__name__)


def build_sentiment_provider(config: Settings, client: httpx.AsyncClient) -> SentimentProvider:
    """Select the configured sentiment variant."""

    if config.sentiment_source() == "news":
        return NewsVoteSentimentProvider(
            client,
            url=config.CRYPTOPANIC_URL,
            token=config.CRYPTOPANIC_TOKEN,
            limit=config.SENTIMENT_NEWS_LIMIT,
        )
    return NeutralSentimentProvider()


def build_adapter(config: Settings, client: httpx.AsyncClient) -> MarketDataAdapter:
    """Wire the Binance client, history cache and sentiment provider together."""

    return MarketDataAdapter(
        client=BinanceRestClient(client),
        cache=InMemoryHistoryCache(
            ttl_s=config.HISTORY_CACHE_TTL_S,
            max_entries=config.HISTORY_CACHE_MAX_ENTRIES,
        ),
        sentiment=build_sentiment_provider(config, client),
        interval=config.KLINE_INTERVAL,
        limit=config.KLINE_LIMIT,
        orderbook_enabled=config.ORDERBOOK_ENABLED,
        orderbook_depth=config.ORDERBOOK_DEPTH,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the shared HTTP client for the lifetime of the process."""

    weights_total = settings.weights_total()
    if weights_total != 100.0:
        logger.warning("scoring_weights_not_normalized", extra={"weights_total": weights_total})

    async with httpx.AsyncClient(
        base_url=settings.BINANCE_REST_URL,
        timeout=settings.HTTP_TIMEOUT_S,
    ) as client:
        app.state.adapter = build_adapter(settings, client)
        logger.info(
            "api_startup",
            extra={
                "service": "api",
                "env": settings.ENV,
                "version": settings.VERSION,
                "interval": settings.KLINE_INTERVAL,
                "sentiment_source": settings.sentiment_source(),
            },
        )
        yield
    logger.info("api_shutdown")


app = FastAPI(title=settings.APP_NAME, version=settings.VERSION, lifespan=lifespan)


def get_adapter(request: Request) -> MarketDataAdapter:
    return request.app.state.adapter


def get_engine_params() -> EngineParams:
    return get_settings().engine_params()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.get("/health")
def health() -> dict[str, str]:
    """Return process liveness status."""

    return {"status": "ok"}


@app.get("/version")
def version() -> dict[str, str]:
    """Return application metadata from shared settings."""

    return asdict(ServiceMeta(name=settings.APP_NAME, version=settings.VERSION, env=settings.ENV))


@app.get("/analyze")
async def analyze_symbol(
    symbol: str | None = Query(default=None),
    adapter: MarketDataAdapter = Depends(get_adapter),
    params: EngineParams = Depends(get_engine_params),
) -> JSONResponse:
    """Fetch market inputs for a symbol and return its signal record."""

    try:
        snapshot = await adapter.build_snapshot(symbol)
        record = analyze(snapshot, params)
    except (InvalidSymbolError, InsufficientDataError) as exc:
        logger.info("analyze_rejected", extra={"symbol": symbol, "error": str(exc)})
        return _error(400, str(exc))
    except UpstreamUnavailableError as exc:
        logger.error("analyze_upstream_failed", extra={"symbol": symbol, "error": str(exc)})
        return _error(500, str(exc))

    logger.info(
        "analyze_completed",
        extra={
            "symbol": record.symbol,
            "trend": record.trend,
            "confidence": record.confidence,
            "signal_strength": record.signal_strength,
            "signal_type": record.signal_type,
        },
    )
    return JSONResponse(content=record.to_dict())
