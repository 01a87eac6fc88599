"""Anthropic Messages API client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import anthropic
from anthropic import AsyncAnthropic

from .config import Settings


class ModelAPIError(Exception):
    """A model call failed; ``status_code`` is None when no HTTP response arrived."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class ModelReply:
    """One model response reduced to plain JSON-ready data."""

    content: list[dict[str, Any]]
    usage: dict[str, Any] = field(default_factory=dict)
    stop_reason: str | None = None

    @property
    def tool_uses(self) -> list[dict[str, Any]]:
        return [block for block in self.content if block.get("type") == "tool_use"]


class ModelClient:
    """Thin wrapper over ``AsyncAnthropic`` with retries disabled."""

    def __init__(
        self,
        api_key: str,
        model: str,
        system_prompt: str,
        max_tokens: int = 2000,
        timeout: float = 60.0,
        client: AsyncAnthropic | None = None,
    ) -> None:
        self.model = model
        self.system_prompt = system_prompt
        self.max_tokens = max_tokens
        self._client = client or AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> ModelClient:
        return cls(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            system_prompt=settings.system_prompt,
            max_tokens=settings.max_tokens,
            timeout=settings.model_timeout,
        )

    async def create(
        self,
        messages: Sequence[dict[str, Any]],
        tools: Sequence[dict[str, Any]] = (),
    ) -> ModelReply:
        """Send the conversation (and tool catalog, if any) to the model."""
        request: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": self.system_prompt,
            "messages": list(messages),
        }
        if tools:
            request["tools"] = list(tools)
            request["tool_choice"] = {"type": "auto"}

        try:
            message = await self._client.messages.create(**request)
        except anthropic.APIStatusError as exc:
            raise ModelAPIError(exc.message, status_code=exc.status_code) from exc
        except anthropic.APIError as exc:
            raise ModelAPIError(str(exc)) from exc

        return ModelReply(
            content=[block.model_dump(exclude_none=True) for block in message.content],
            usage=message.usage.model_dump(exclude_none=True) if message.usage else {},
            stop_reason=message.stop_reason,
        )
