"""Error taxonomy shared by the engine, the market-data adapter and the API."""


class TrendSignalError(Exception):
    """Base class for every failure surfaced to analysis callers."""


class InsufficientDataError(TrendSignalError):
    """Raised when a series is shorter than the window an indicator needs."""

    def __init__(self, required: int, available: int, what: str = "series") -> None:
        self.required = required
        self.available = available
        self.what = what
        super().__init__(
            f"insufficient data: {what} needs {required} points, got {available}"
        )


class InvalidSymbolError(TrendSignalError):
    """Raised by the adapter for a malformed or unknown trading symbol."""

    def __init__(self, symbol: str, detail: str = "invalid symbol") -> None:
        self.symbol = symbol
        super().__init__(f"{detail}: {symbol!r}")


class UpstreamUnavailableError(TrendSignalError):
    """Raised by the adapter when market data cannot be fetched."""

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        super().__init__(f"{source} unavailable: {detail}")
