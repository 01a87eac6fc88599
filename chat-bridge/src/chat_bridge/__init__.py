"""Chat bridge between the Anthropic Messages API and the Mapbox gateway tools."""

__version__ = "1.0.0"
