"""Run the analysis API: ``python -m trend_signal.services.api``."""

import logging

import uvicorn

from trend_signal.core.config import get_settings
from trend_signal.core.logging import configure_logging


def main() -> int:
    """Serve the app with the JSON log handler instead of uvicorn's own."""

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, service="api")
    logging.getLogger(__name__).info(
        "api_serving", extra={"host": settings.HOST, "port": settings.PORT}
    )
    uvicorn.run(
        "trend_signal.services.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
