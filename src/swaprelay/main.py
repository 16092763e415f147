"""Main entry point - runs the trade relay API."""

import logging
import sys

import uvicorn

from swaprelay.api.app import create_app
from swaprelay.config import get_settings
from swaprelay.signing.base import KeyLoadError

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main():
    """Main entry point."""
    settings = get_settings()
    configure_logging(settings.debug)

    logger.info("Starting swaprelay...")
    logger.info(f"Config: {settings.get_safe_dict()}")

    if not settings.hmac_secret:
        logger.warning("HMAC_SECRET not set - every trade request will be rejected")

    # Without a key no trade can be signed, so refuse to start
    try:
        app = create_app(settings)
    except KeyLoadError as e:
        logger.critical(f"Cannot start: {e}")
        sys.exit(1)

    logger.info(f"Signer on {settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
