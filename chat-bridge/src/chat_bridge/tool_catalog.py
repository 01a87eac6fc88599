"""Read-through cache of the gateway's tool catalog."""

from __future__ import annotations

import logging
from typing import Any

from .gateway_client import GatewayClient, GatewayError

logger = logging.getLogger(__name__)


def to_model_tool(descriptor: dict[str, Any]) -> dict[str, Any]:
    """Convert a gateway tool descriptor into the model's tool format."""
    return {
        "name": descriptor["name"],
        "description": descriptor.get("description", ""),
        "input_schema": descriptor.get("inputSchema") or {"type": "object", "properties": {}},
    }


class ToolCatalog:
    """Tool descriptors fetched from the gateway, held as an immutable snapshot.

    The snapshot is replaced wholesale on each successful refresh and never
    mutated in place, so handlers can keep a reference to it for a whole
    request. Concurrent refreshes on an empty cache are harmless: both fetch
    the same static catalog.
    """

    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway
        self._snapshot: tuple[dict[str, Any], ...] = ()

    @property
    def snapshot(self) -> tuple[dict[str, Any], ...]:
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    async def refresh(self) -> tuple[dict[str, Any], ...]:
        """Fetch the catalog; on failure keep whatever was cached before."""
        logger.info("Fetching tool catalog from %s", self._gateway.base_url)
        try:
            descriptors = await self._gateway.fetch_tools()
            snapshot = tuple(to_model_tool(descriptor) for descriptor in descriptors)
        except (GatewayError, KeyError, TypeError, ValueError) as exc:
            logger.error("Failed to fetch gateway tools: %s", exc)
            logger.warning("Continuing without tools; will retry on the next chat request")
            return self._snapshot

        self._snapshot = snapshot
        logger.info(
            "Loaded %d tools from gateway: %s",
            len(snapshot),
            [tool["name"] for tool in snapshot],
        )
        return snapshot

    async def ensure_loaded(self) -> tuple[dict[str, Any], ...]:
        """Return the cached catalog, fetching it first if the cache is empty."""
        if not self._snapshot:
            return await self.refresh()
        return self._snapshot
