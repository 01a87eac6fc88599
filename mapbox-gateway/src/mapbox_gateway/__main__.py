"""Entry point for running the Mapbox gateway service."""

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
    """Run the Mapbox gateway service."""
    try:
        settings = get_settings()
    except ValidationError:
        logger.error("MAPBOX_ACCESS_TOKEN environment variable is required")
        sys.exit(1)

    logger.info(f"Starting Mapbox gateway on {settings.app_host}:{settings.app_port}")
    logger.info(f"Health check available at: http://localhost:{settings.app_port}/health")

    uvicorn.run(
        "mapbox_gateway.api.app:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
