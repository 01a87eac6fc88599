"""Gateway tool routes."""

from . import directions, geocoding, static_images

__all__ = ["directions", "geocoding", "static_images"]
