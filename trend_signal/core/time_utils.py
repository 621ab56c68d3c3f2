"""UTC time helpers shared by the adapters."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC datetime with timezone attached."""

    return datetime.now(timezone.utc)


def ms_to_utc(timestamp_ms: int) -> datetime:
    """Convert an exchange millisecond timestamp to an aware UTC datetime."""

    return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)
