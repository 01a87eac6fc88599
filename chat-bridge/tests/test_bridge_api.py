"""Tests for the chat bridge HTTP API."""

from __future__ import annotations

from datetime import datetime

import httpx
import pytest

from chat_bridge.gateway_client import GatewayError
from chat_bridge.middleware import RATE_LIMIT_MESSAGE
from chat_bridge.model_client import ModelAPIError
from model_replies import text_reply, tool_reply


class TestServiceEndpoints:
    """Tests for the page, health, tool listing and unknown routes."""

    def test_index_page(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Mapbox Assistant" in response.text

    def test_static_assets(self, client):
        response = client.get("/static/chat.js")

        assert response.status_code == 200

    def test_health_reports_loaded_tools(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "mapbox-chat-bridge"
        assert body["toolsLoaded"] == 2
        assert datetime.fromisoformat(body["timestamp"]) is not None

    def test_startup_refreshes_catalog_once(self, client, mock_gateway):
        client.get("/health")
        client.get("/api/tools")

        mock_gateway.fetch_tools.assert_awaited_once()

    def test_tools_in_model_format(self, client):
        response = client.get("/api/tools")

        assert response.status_code == 200
        tools = response.json()["tools"]
        assert [tool["name"] for tool in tools] == ["geocode_forward", "get_directions"]
        assert tools[0]["input_schema"]["required"] == ["query"]
        assert "inputSchema" not in tools[0]

    def test_startup_survives_gateway_outage(self, make_client, mock_gateway):
        mock_gateway.fetch_tools.side_effect = GatewayError("connection refused")

        with make_client() as client:
            health = client.get("/health").json()
            tools = client.get("/api/tools").json()

        assert health["toolsLoaded"] == 0
        assert tools == {"tools": []}

    def test_unknown_route(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    def test_wrong_method_is_not_found(self, client):
        response = client.get("/api/chat")

        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    def test_security_headers(self, client):
        response = client.get("/")

        policy = response.headers["Content-Security-Policy"]
        assert "https://cdn.tailwindcss.com" in policy
        assert "img-src 'self' data: https:" in policy
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_cors_allows_credentials(self, client):
        response = client.get("/health", headers={"Origin": "http://example.com"})

        assert response.headers["access-control-allow-credentials"] == "true"


class TestChatValidation:
    """Tests for /api/chat request validation."""

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"message": ""},
            {"message": 42},
            {"message": ["hi"]},
        ],
    )
    def test_message_required(self, client, mock_model, body):
        response = client.post("/api/chat", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Message is required and must be a string"}
        mock_model.create.assert_not_awaited()

    def test_invalid_json_body(self, client):
        response = client.post(
            "/api/chat",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Message is required and must be a string"}

    def test_history_must_be_a_list(self, client, mock_model):
        response = client.post(
            "/api/chat",
            json={"message": "hi", "conversationHistory": {"role": "user"}},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "conversationHistory must be an array"}
        mock_model.create.assert_not_awaited()


class TestChat:
    """Tests for successful and failing chat turns."""

    def test_plain_answer(self, client, mock_model):
        history = [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": [{"type": "text", "text": "Hello"}]},
        ]
        mock_model.create.return_value = text_reply("Paris is in France.", 12, 7)

        response = client.post(
            "/api/chat",
            json={"message": "Where is Paris?", "conversationHistory": history},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["response"] == [{"type": "text", "text": "Paris is in France."}]
        assert len(body["conversationHistory"]) == len(history) + 2
        assert body["conversationHistory"][-2] == {"role": "user", "content": "Where is Paris?"}
        assert body["conversationHistory"][-1]["role"] == "assistant"
        assert body["usage"] == {"input_tokens": 12, "output_tokens": 7}
        mock_model.create.assert_awaited_once()

    def test_history_defaults_to_empty(self, client, mock_model):
        response = client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 200
        messages, tools = mock_model.create.await_args.args
        assert messages == [{"role": "user", "content": "Hi"}]
        assert [tool["name"] for tool in tools] == ["geocode_forward", "get_directions"]

    def test_tool_round(self, client, mock_model, mock_gateway):
        mock_gateway.call_tool.return_value = {"success": True, "results": []}
        mock_model.create.side_effect = [
            tool_reply("geocode_forward", {"query": "Paris"}),
            text_reply("Paris is at 2.35, 48.85."),
        ]

        response = client.post("/api/chat", json={"message": "Find Paris"})

        assert response.status_code == 200
        body = response.json()
        assert body["response"][0]["text"] == "Paris is at 2.35, 48.85."
        assert len(body["conversationHistory"]) == 2
        assert body["usage"] == {"input_tokens": 20, "output_tokens": 10}
        mock_gateway.call_tool.assert_awaited_once_with("geocode_forward", {"query": "Paris"})

    @pytest.mark.parametrize(
        "status_code,error",
        [
            (401, "Invalid API key"),
            (429, "Rate limit exceeded"),
        ],
    )
    def test_model_status_errors(self, client, mock_model, status_code, error):
        mock_model.create.side_effect = ModelAPIError("upstream", status_code=status_code)

        response = client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == status_code
        assert response.json() == {"error": error}

    @pytest.mark.parametrize("status_code", [None, 500, 529])
    def test_other_model_errors(self, client, mock_model, status_code):
        mock_model.create.side_effect = ModelAPIError("upstream", status_code=status_code)

        response = client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process chat message"}

    def test_tool_loop_limit(self, client, mock_model):
        mock_model.create.return_value = tool_reply("geocode_forward", {"query": "Paris"})

        response = client.post("/api/chat", json={"message": "Loop forever"})

        assert response.status_code == 500
        assert response.json() == {"error": "Tool call limit exceeded"}
        # MAX_TOOL_ROUNDS is 3 in the test settings
        assert mock_model.create.await_count == 4

    def test_unexpected_chat_failure(self, client, mock_model):
        mock_model.create.side_effect = RuntimeError("boom")

        response = client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process chat message"}

    def test_unhandled_route_error(self, make_client):
        with make_client(raise_server_exceptions=False) as client:
            client.app.state.catalog = None
            response = client.get("/health")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


class TestRateLimit:
    """Tests for the /api/ request limit."""

    def test_limit_applies_to_api_routes(self, make_client):
        with make_client(rate_limit_requests=2) as client:
            first = client.get("/api/tools")
            second = client.get("/api/tools")
            third = client.get("/api/tools")

        assert first.status_code == 200
        assert first.headers["RateLimit-Remaining"] == "1"
        assert second.status_code == 200
        assert third.status_code == 429
        assert third.text == RATE_LIMIT_MESSAGE
        assert "Retry-After" in third.headers

    def test_other_routes_are_not_counted(self, make_client):
        with make_client(rate_limit_requests=1) as client:
            for _ in range(3):
                assert client.get("/health").status_code == 200
            assert client.get("/api/tools").status_code == 200
            assert client.get("/api/tools").status_code == 429


def test_gateway_is_reached_over_http(settings, mock_model):
    """End to end through a real GatewayClient on an in-memory transport."""
    from fastapi.testclient import TestClient

    from chat_bridge.gateway_client import GatewayClient
    from chat_bridge.main import create_app

    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path))
        if request.url.path == "/tools":
            return httpx.Response(200, json={"tools": [{"name": "get_matrix", "description": "m"}]})
        return httpx.Response(200, json={"success": True, "durations": [[0, 60], [60, 0]]})

    gateway = GatewayClient("http://gateway.test", transport=httpx.MockTransport(handler))
    mock_model.create.side_effect = [
        tool_reply("get_matrix", {"coordinates": [[0, 0], [1, 1]]}),
        text_reply("About a minute."),
    ]

    with TestClient(create_app(settings, gateway=gateway, model=mock_model)) as client:
        response = client.post("/api/chat", json={"message": "How far?"})

    assert response.status_code == 200
    assert calls == [("GET", "/tools"), ("POST", "/get_matrix")]
    follow_up_messages = mock_model.create.await_args_list[1].args[0]
    tool_result = follow_up_messages[-1]["content"][0]
    assert tool_result["tool_use_id"] == "toolu_1"
    assert '"durations"' in tool_result["content"]
