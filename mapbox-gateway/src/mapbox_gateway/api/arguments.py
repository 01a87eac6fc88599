"""Tool argument models and the shared success/failure envelope."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..providers.mapbox import MapboxProviderError
from ..tools.definitions import DEFAULT_STYLE

logger = logging.getLogger(__name__)

Number = int | float
Coordinate = list[Number]


async def read_arguments(request: Request) -> dict[str, Any]:
    """Read tool arguments from ``body.arguments``, falling back to the body itself."""
    raw = await request.body()
    if not raw:
        return {}
    body = json.loads(raw)
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    arguments = body.get("arguments")
    return arguments if arguments else body


def tool_failure(operation: str, error: Exception) -> JSONResponse:
    """Log a failed tool call and build the ``{success: false}`` response."""
    logger.error("%s error: %s", operation, error)
    message = error.message if isinstance(error, MapboxProviderError) else str(error)
    return JSONResponse(status_code=500, content={"success": False, "error": message})


class ToolArguments(BaseModel):
    model_config = {"extra": "ignore"}


class GeocodeForwardArguments(ToolArguments):
    query: str
    limit: Number = 5
    country: str | None = None


class GeocodeReverseArguments(ToolArguments):
    longitude: Number
    latitude: Number
    types: list[str] | None = None


class DirectionsArguments(ToolArguments):
    coordinates: list[Coordinate]
    profile: str = "driving"
    geometries: str = "geojson"
    steps: bool = True
    overview: str = "full"


class Marker(BaseModel):
    longitude: Number
    latitude: Number
    size: str | None = "small"
    color: str | None = "red"
    label: str | int | None = None


class StaticImageArguments(ToolArguments):
    style: str = DEFAULT_STYLE
    width: Number = 600
    height: Number = 400
    zoom: Number | None = None
    center: Coordinate | None = None
    bbox: list[Number] | None = None
    markers: list[Marker] = Field(default_factory=list)


class RouteMapArguments(ToolArguments):
    coordinates: list[Coordinate]
    style: str = DEFAULT_STYLE
    width: Number = 800
    height: Number = 600
    route_polyline: str | None = None


class MatrixArguments(ToolArguments):
    coordinates: list[Coordinate]
    profile: str = "driving"
    sources: list[int] | None = None
    destinations: list[int] | None = None
    annotations: list[str] = Field(default_factory=lambda: ["duration", "distance"])
