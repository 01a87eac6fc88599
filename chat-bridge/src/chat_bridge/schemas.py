from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "healthy"
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    tools_loaded: int = Field(default=0, alias="toolsLoaded")
    service: str = "mapbox-chat-bridge"

    model_config = {"populate_by_name": True}


class ToolsResponse(BaseModel):
    tools: list[dict[str, Any]]


class ChatResponse(BaseModel):
    """Final answer of one chat turn."""

    response: list[dict[str, Any]]
    conversation_history: list[dict[str, Any]] = Field(alias="conversationHistory")
    usage: dict[str, Any]

    model_config = {"populate_by_name": True}
