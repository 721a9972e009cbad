"""
Work.krd render service entrypoint - runs uvicorn server.
"""

import uvicorn

from workkrd.app import build_app
from workkrd.config import get_settings
from workkrd.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> None:
    """Run the render service."""
    settings = get_settings()
    setup_logging(settings.log_level)
    app = build_app(settings)

    logger.info(f"Starting Work.krd render service on http://{settings.host}:{settings.port}")
    logger.info(f"Docs: http://{settings.host}:{settings.port}/docs")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
