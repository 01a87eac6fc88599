"""Shared test fixtures and configuration."""

from __future__ import annotations

import os

import httpx
import pytest
from unittest.mock import patch

os.environ.setdefault("MAPBOX_ACCESS_TOKEN", "test-token")


@pytest.fixture
def client():
    """TestClient bound to the gateway application."""
    from fastapi.testclient import TestClient

    from mapbox_gateway.api.app import app

    return TestClient(app)


@pytest.fixture
def mapbox_transport():
    """Route provider traffic through an in-memory transport.

    Tests set ``transport.response`` (a callable taking the request) and read
    back ``transport.requests`` to inspect what the provider sent.
    """

    class Recorder:
        def __init__(self):
            self.requests: list[httpx.Request] = []
            self.response = lambda request: httpx.Response(200, json={})

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.response(request)

    recorder = Recorder()

    def fake_client() -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url="https://api.mapbox.com",
            transport=httpx.MockTransport(recorder.handler),
        )

    with patch("mapbox_gateway.providers.mapbox._client", fake_client):
        yield recorder


@pytest.fixture
def sample_features():
    """Geocoding features as Mapbox returns them."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "id": "place.123",
                "type": "Feature",
                "place_type": ["place"],
                "relevance": 1,
                "properties": {"wikidata": "Q60"},
                "text": "New York",
                "place_name": "New York, New York, United States",
                "center": [-73.9866, 40.7306],
                "geometry": {"type": "Point", "coordinates": [-73.9866, 40.7306]},
                "context": [{"id": "region.1", "text": "New York"}],
            },
            {
                "id": "poi.456",
                "type": "Feature",
                "place_type": ["poi"],
                "relevance": 0.9,
                "properties": {"category": "landmark"},
                "place_name": "Times Square, New York",
                "center": [-73.985, 40.758],
                "context": [],
            },
        ],
    }


@pytest.fixture
def sample_route():
    """A GeoJSON directions response."""
    return {
        "code": "Ok",
        "routes": [
            {
                "distance": 1520.4,
                "duration": 312.7,
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[-73.985, 40.758], [-73.9855, 40.7484]],
                },
                "legs": [{"steps": [{"maneuver": {"instruction": "Head south"}}]}],
            }
        ],
        "waypoints": [
            {"name": "7th Avenue", "location": [-73.985, 40.758]},
            {"name": "5th Avenue", "location": [-73.9855, 40.7484]},
        ],
    }
