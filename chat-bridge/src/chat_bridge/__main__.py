"""Entry point for running the chat bridge."""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from .config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def main():
    """Run the chat bridge."""
    try:
        settings = get_settings()
    except ValidationError:
        logger.error("ANTHROPIC_API_KEY environment variable is required")
        sys.exit(1)

    logger.info(f"Starting chat bridge on {settings.app_host}:{settings.app_port}")
    logger.info(f"Chat page available at: http://localhost:{settings.app_port}")
    logger.info(f"Using gateway at: {settings.gateway_url}")

    uvicorn.run(
        "chat_bridge.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
