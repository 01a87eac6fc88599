"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import get_settings
from ..tools import get_tool_definitions_for_api
from .routes import directions, geocoding, static_images
from .security import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)

SERVICE_NAME = "mapbox-gateway"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Mapbox gateway starting with %d tools", len(get_tool_definitions_for_api()))
    yield
    logger.info("Mapbox gateway shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Mapbox Gateway",
        description="Mapbox geocoding, routing and static map tools over HTTP",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
    )

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(geocoding.router, tags=["geocoding"])
    app.include_router(directions.router, tags=["directions"])
    app.include_router(static_images.router, tags=["static-images"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
        }

    @app.get("/tools")
    async def list_tools():
        """List the tools this gateway serves."""
        return {"tools": get_tool_definitions_for_api()}

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Wrong method on a known path is reported like an unknown path
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return app


app = create_app()
