from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .agent import Assistant
from .api import router
from .config import Settings, get_settings
from .gateway_client import GatewayClient
from .middleware import RateLimitMiddleware, SecurityHeadersMiddleware
from .model_client import ModelClient
from .tool_catalog import ToolCatalog

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Chat bridge starting; gateway at %s", settings.gateway_url)
    await app.state.catalog.refresh()
    yield
    logger.info("Chat bridge shutting down")


def create_app(
    settings: Settings | None = None,
    *,
    gateway: GatewayClient | None = None,
    model: ModelClient | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    gateway = gateway or GatewayClient.from_settings(settings)
    model = model or ModelClient.from_settings(settings)
    catalog = ToolCatalog(gateway)

    app = FastAPI(
        title="Mapbox Chat Bridge",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.assistant = Assistant(
        model=model,
        gateway=gateway,
        catalog=catalog,
        max_tool_rounds=settings.max_tool_rounds,
    )

    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.get("/", include_in_schema=False)
    async def index():
        return FileResponse(STATIC_DIR / "index.html")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return app


app = create_app()
