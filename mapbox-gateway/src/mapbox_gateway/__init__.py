"""HTTP gateway exposing Mapbox geocoding, routing and static map tools."""

__version__ = "1.0.0"
