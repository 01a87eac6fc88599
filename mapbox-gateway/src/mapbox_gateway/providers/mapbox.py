"""Mapbox REST API provider."""

from __future__ import annotations

import logging
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from ..config import get_settings
from ..static_maps import URI_COMPONENT_SAFE, format_coordinate, format_number

logger = logging.getLogger(__name__)

GEOCODING_PATH = "/geocoding/v5/mapbox.places"
DIRECTIONS_PATH = "/directions/v5/mapbox"
MATRIX_PATH = "/directions-matrix/v1/mapbox"


class MapboxProviderError(Exception):
    """Error from the Mapbox provider."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.cause = cause


def _client() -> httpx.AsyncClient:
    """Create an HTTP client bound to the configured Mapbox API."""
    settings = get_settings()
    return httpx.AsyncClient(
        base_url=settings.mapbox_api_base_url,
        timeout=settings.request_timeout,
    )


def _error_message(response: httpx.Response) -> str:
    """Prefer the message Mapbox puts in its error body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Request failed with status code {response.status_code}"


def _coordinate_path(coordinates: Sequence[Sequence[float]]) -> str:
    return ";".join(format_coordinate(coord) for coord in coordinates)


async def _get(path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
    """Issue a single signed GET against the Mapbox API and return the JSON body."""
    settings = get_settings()
    query = {"access_token": settings.mapbox_access_token, **(params or {})}

    try:
        async with _client() as client:
            response = await client.get(path, params=query)
    except httpx.HTTPError as exc:
        raise MapboxProviderError(str(exc) or exc.__class__.__name__, cause=exc) from exc

    if not response.is_success:
        message = _error_message(response)
        logger.warning("Mapbox returned %s for %s: %s", response.status_code, path, message)
        raise MapboxProviderError(message, status_code=response.status_code)

    return response.json()


async def forward_geocode(
    query: str,
    limit: int = 5,
    country: str | None = None,
) -> dict[str, Any]:
    """
    Geocode an address or place name.

    Args:
        query: Free-form address or place name
        limit: Maximum number of features to return
        country: Optional ISO 3166-1 alpha-2 country filter

    Returns:
        Raw GeoJSON feature collection from the geocoding API
    """
    params = {"limit": format_number(limit)}
    if country:
        params["country"] = country

    return await _get(f"{GEOCODING_PATH}/{quote(query, safe=URI_COMPONENT_SAFE)}.json", params)


async def reverse_geocode(
    longitude: float,
    latitude: float,
    types: Sequence[str] | None = None,
) -> dict[str, Any]:
    """
    Look up the places at a coordinate.

    Args:
        longitude: Longitude, placed verbatim in the request path
        latitude: Latitude, placed verbatim in the request path
        types: Optional feature types to restrict results to

    Returns:
        Raw GeoJSON feature collection from the geocoding API
    """
    params: dict[str, str] = {}
    if types:
        params["types"] = ",".join(types)

    return await _get(f"{GEOCODING_PATH}/{format_coordinate((longitude, latitude))}.json", params)


async def get_route(
    coordinates: Sequence[Sequence[float]],
    profile: str = "driving",
    geometries: str = "geojson",
    steps: bool = True,
    overview: str = "full",
) -> dict[str, Any]:
    """Fetch a route through the given waypoints from the directions API."""
    params = {
        "geometries": geometries,
        "steps": "true" if steps else "false",
        "overview": overview,
    }
    return await _get(f"{DIRECTIONS_PATH}/{profile}/{_coordinate_path(coordinates)}", params)


async def get_matrix(
    coordinates: Sequence[Sequence[float]],
    profile: str = "driving",
    sources: Sequence[int] | None = None,
    destinations: Sequence[int] | None = None,
    annotations: Sequence[str] = ("duration", "distance"),
) -> dict[str, Any]:
    """Fetch a travel time / distance matrix between the given points."""
    params = {"annotations": ",".join(annotations)}
    if sources is not None:
        params["sources"] = ";".join(format_number(index) for index in sources)
    if destinations is not None:
        params["destinations"] = ";".join(format_number(index) for index in destinations)

    return await _get(f"{MATRIX_PATH}/{profile}/{_coordinate_path(coordinates)}", params)
