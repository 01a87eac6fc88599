"""Shared test fixtures and configuration."""

from __future__ import annotations

import os

import pytest
from unittest.mock import AsyncMock, MagicMock

os.environ.setdefault("ANTHROPIC_API_KEY", "test-key")

from chat_bridge.config import Settings  # noqa: E402
from model_replies import text_reply  # noqa: E402


@pytest.fixture
def gateway_tools():
    """Tool descriptors as the gateway publishes them."""
    return [
        {
            "name": "geocode_forward",
            "description": "Convert an address or place name to coordinates",
            "inputSchema": {
                "type": "object",
                "properties": {"query": {"type": "string"}},
                "required": ["query"],
            },
        },
        {
            "name": "get_directions",
            "description": "Get turn-by-turn directions between coordinates",
            "inputSchema": {
                "type": "object",
                "properties": {"coordinates": {"type": "array"}},
                "required": ["coordinates"],
            },
        },
    ]


@pytest.fixture
def mock_gateway(gateway_tools):
    """Gateway client double with a working tool catalog."""
    gateway = MagicMock()
    gateway.base_url = "http://gateway.test"
    gateway.fetch_tools = AsyncMock(return_value=gateway_tools)
    gateway.call_tool = AsyncMock(return_value={"success": True})
    return gateway


@pytest.fixture
def mock_model():
    """Model client double; tests set ``create.return_value`` or ``side_effect``."""
    model = MagicMock()
    model.create = AsyncMock(return_value=text_reply("Hello!"))
    return model


@pytest.fixture
def settings():
    return Settings(
        ANTHROPIC_API_KEY="test-key",
        GATEWAY_URL="http://gateway.test",
        MAX_TOOL_ROUNDS=3,
        RATE_LIMIT_REQUESTS=100,
    )


@pytest.fixture
def make_client(settings, mock_gateway, mock_model):
    """Build a TestClient over a fresh app; lifespan runs inside the ``with``."""
    from fastapi.testclient import TestClient

    from chat_bridge.main import create_app

    def factory(raise_server_exceptions: bool = True, **overrides):
        app_settings = settings.model_copy(update=overrides) if overrides else settings
        app = create_app(app_settings, gateway=mock_gateway, model=mock_model)
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    return factory


@pytest.fixture
def client(make_client):
    with make_client() as test_client:
        yield test_client
