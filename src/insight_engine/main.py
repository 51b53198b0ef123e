from __future__ import annotations
import logging
import uvicorn
from insight_engine.infrastructure.config import get_settings

logger = logging.getLogger("insight_engine")


def main() -> None:
    """Configure logging and serve the API with uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    # httpx logs full request URLs at INFO, and Gemini carries its key in the query.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if settings.default_provider is None:
        logger.info("No default provider configured; requests without one use heuristic analysis")
    else:
        logger.info("Default backend: %s", settings.default_provider.value)

    uvicorn.run(
        "insight_engine.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
