"""URL builders for the Mapbox Static Images API.

Nothing in this module touches the network: the gateway hands the signed
image URL back to the caller, and the image itself is fetched by whoever
renders it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence
from urllib.parse import quote, urlencode

START_PIN_COLOR = "00ff00"
END_PIN_COLOR = "ff0000"
ROUTE_PATH_STYLE = "path-5+0080ff-0.75"
BOUNDING_BOX_PADDING = 0.1

# Kept literal when percent-encoding a single URL component, on top of [A-Za-z0-9_.-~]
URI_COMPONENT_SAFE = "!*'()"

Coordinate = Sequence[float]


@dataclass(frozen=True)
class RouteMap:
    """A route map image URL together with the viewport it was built from."""

    image_url: str
    start_coordinates: list[float]
    end_coordinates: list[float]
    bounding_box: list[float]


def format_number(value: float) -> str:
    """Render a number the way it should appear in a Mapbox URL.

    Integral floats lose their trailing ``.0`` so ``-74.0`` prints as ``-74``;
    everything else keeps its shortest round-trip digits, with no rounding
    and never in exponent form (``5e-05`` prints as ``0.00005``).
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    return str(value)


def format_coordinate(coordinate: Coordinate) -> str:
    return ",".join(format_number(value) for value in coordinate)


def encode_marker(
    longitude: float,
    latitude: float,
    size: str | None = "small",
    color: str | None = "red",
    label: str | None = None,
) -> str:
    """Encode a marker overlay as ``pin-{size}[-{label}]+{color}({lon},{lat})``."""
    token = f"pin-{size or 'small'}"
    if label:
        token += f"-{label}"
    token += f"+{color or 'red'}({format_number(longitude)},{format_number(latitude)})"
    return token


def bounding_box(
    coordinates: Sequence[Coordinate], padding: float = BOUNDING_BOX_PADDING
) -> list[float]:
    """Compute ``[minLon, minLat, maxLon, maxLat]`` expanded by ``padding`` of the span."""
    if not coordinates:
        raise ValueError("At least one coordinate is required to compute a bounding box")

    lons = [coord[0] for coord in coordinates]
    lats = [coord[1] for coord in coordinates]
    min_lon, max_lon = min(lons), max(lons)
    min_lat, max_lat = min(lats), max(lats)

    lon_padding = (max_lon - min_lon) * padding
    lat_padding = (max_lat - min_lat) * padding

    return [
        min_lon - lon_padding,
        min_lat - lat_padding,
        max_lon + lon_padding,
        max_lat + lat_padding,
    ]


def _static_base(base_url: str, style: str) -> str:
    return f"{base_url.rstrip('/')}/styles/v1/{style}/static"


def _sign(url: str, access_token: str) -> str:
    return f"{url}?{urlencode({'access_token': access_token})}"


def _format_bbox(bbox: Sequence[float]) -> str:
    return "[" + ",".join(format_number(value) for value in bbox) + "]"


def build_static_image_url(
    base_url: str,
    access_token: str,
    style: str,
    width: float,
    height: float,
    zoom: float | None = None,
    center: Coordinate | None = None,
    bbox: Sequence[float] | None = None,
    markers: Sequence[str] = (),
) -> str:
    """Build a signed static image URL.

    ``markers`` are already-encoded overlay tokens (see ``encode_marker``).
    The viewport is the bbox when given, else ``center`` + ``zoom`` when both
    are given; otherwise the segment is omitted and Mapbox fits the overlays.
    """
    url = _static_base(base_url, style)

    if markers:
        url += "/" + ",".join(markers)

    if bbox:
        url += "/" + _format_bbox(bbox)
    elif center and zoom is not None:
        url += f"/{format_coordinate(center)},{format_number(zoom)}"

    url += f"/{format_number(width)}x{format_number(height)}"
    return _sign(url, access_token)


def build_route_map_url(
    base_url: str,
    access_token: str,
    coordinates: Sequence[Coordinate],
    style: str,
    width: float,
    height: float,
    route_polyline: str | None = None,
) -> RouteMap:
    """Build a route map with green start / red end pins and an optional path overlay."""
    if not coordinates:
        raise ValueError("coordinates must contain at least one [longitude, latitude] pair")

    start = list(coordinates[0])
    end = list(coordinates[-1])

    overlays = [
        f"pin-s-a+{START_PIN_COLOR}({format_coordinate(start)})",
        f"pin-s-b+{END_PIN_COLOR}({format_coordinate(end)})",
    ]
    if route_polyline:
        overlays.insert(0, f"{ROUTE_PATH_STYLE}({quote(route_polyline, safe=URI_COMPONENT_SAFE)})")

    bbox = bounding_box(coordinates)

    url = _static_base(base_url, style)
    url += "/" + ",".join(overlays)
    url += "/" + _format_bbox(bbox)
    url += f"/{format_number(width)}x{format_number(height)}"

    return RouteMap(
        image_url=_sign(url, access_token),
        start_coordinates=start,
        end_coordinates=end,
        bounding_box=bbox,
    )
