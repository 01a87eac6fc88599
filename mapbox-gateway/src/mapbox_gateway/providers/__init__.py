"""Upstream API providers module."""

from .mapbox import (
    MapboxProviderError,
    forward_geocode,
    get_matrix,
    get_route,
    reverse_geocode,
)

__all__ = [
    "MapboxProviderError",
    "forward_geocode",
    "get_matrix",
    "get_route",
    "reverse_geocode",
]
