"""Client for communicating with the Mapbox gateway service."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import Settings

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Error from the Mapbox gateway."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _failure_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return f"Request failed with status code {response.status_code}: {body['error']}"
    return f"Request failed with status code {response.status_code}"


class GatewayClient:
    """Async client for the gateway's tool catalog and tool endpoints."""

    def __init__(
        self,
        base_url: str,
        tools_timeout: float = 10.0,
        tool_call_timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.tools_timeout = tools_timeout
        self.tool_call_timeout = tool_call_timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> GatewayClient:
        return cls(
            settings.gateway_url,
            tools_timeout=settings.tools_timeout,
            tool_call_timeout=settings.tool_call_timeout,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, transport=self._transport)

    async def fetch_tools(self) -> list[dict[str, Any]]:
        """
        Get the tool catalog published by the gateway.

        Returns:
            Tool descriptors as ``{name, description, inputSchema}`` dicts
        """
        try:
            async with self._client() as client:
                response = await client.get("/tools", timeout=self.tools_timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GatewayError(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise GatewayError(_failure_message(response), status_code=response.status_code)

        payload = response.json()
        tools = payload.get("tools") if isinstance(payload, dict) else None
        if not isinstance(tools, list):
            raise GatewayError("Gateway tool catalog is missing the 'tools' list")
        return tools

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """
        Invoke a gateway tool.

        Args:
            name: Tool name, which is also the gateway endpoint path
            arguments: Tool input exactly as the model produced it

        Returns:
            The gateway's JSON response
        """
        try:
            async with self._client() as client:
                response = await client.post(
                    f"/{name}",
                    json={"arguments": arguments},
                    timeout=self.tool_call_timeout,
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GatewayError(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise GatewayError(_failure_message(response), status_code=response.status_code)

        return response.json()
