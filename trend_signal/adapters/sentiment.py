"""Sentiment providers feeding a deterministic score in [0, 1] to the snapshot."""

import logging
from datetime import datetime
from typing import Any, Protocol

import httpx

from trend_signal.core.errors import UpstreamUnavailableError
from trend_signal.core.types import DEFAULT_SENTIMENT

_QUOTE_ASSETS = ("USDT", "USDC", "BUSD", "FDUSD")

logger = logging.getLogger(__name__)


class SentimentProvider(Protocol):
    name: str

    async def score(self, symbol: str, at: datetime) -> float: ...


class NeutralSentimentProvider:
    """Fixed score used when no sentiment source is configured."""

    name = "neutral"

    def __init__(self, value: float = DEFAULT_SENTIMENT) -> None:
        self.value = max(0.0, min(1.0, value))

    async def score(self, symbol: str, at: datetime) -> float:
        return self.value


def base_asset(symbol: str) -> str:
    """Strip a known quote asset suffix, e.g. BTCUSDT -> BTC."""

    for quote in _QUOTE_ASSETS:
        if symbol.endswith(quote) and len(symbol) > len(quote):
            return symbol[: -len(quote)]
    return symbol


def vote_score(posts: list[dict[str, Any]]) -> float:
    """Map positive/negative votes onto [0, 1]; 0.5 when nothing is voted."""

    positive = sum(1 for post in posts if post.get("vote") == "positive")
    negative = sum(1 for post in posts if post.get("vote") == "negative")
    if positive + negative == 0:
        return DEFAULT_SENTIMENT
    balance = (positive - negative) / (positive + negative)
    return max(0.0, min(1.0, balance * 0.5 + 0.5))


class NewsVoteSentimentProvider:
    """Scores a symbol from the community votes on its latest CryptoPanic posts."""

    name = "news"

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        token: str = "",
        limit: int = 20,
    ) -> None:
        self._client = client
        self.url = url
        self.token = token
        self.limit = max(1, limit)

    async def score(self, symbol: str, at: datetime) -> float:
        params: dict[str, Any] = {"currencies": base_asset(symbol)}
        if self.token:
            params["auth_token"] = self.token

        try:
            response = await self._client.get(self.url, params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamUnavailableError("cryptopanic", str(exc)) from exc

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            raise UpstreamUnavailableError("cryptopanic", "posts payload has no results list")

        posts = [post for post in results[: self.limit] if isinstance(post, dict)]
        value = vote_score(posts)
        logger.debug(
            "news_sentiment_scored",
            extra={"symbol": symbol, "posts": len(posts), "score": value, "at": at.isoformat()},
        )
        return value
