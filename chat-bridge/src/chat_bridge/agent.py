from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Sequence

from .gateway_client import GatewayClient
from .model_client import ModelClient
from .tool_catalog import ToolCatalog

logger = logging.getLogger(__name__)

USAGE_COUNTERS = ("input_tokens", "output_tokens")


class ToolLoopLimitExceeded(Exception):
    """The model kept requesting tools past the configured number of rounds."""


@dataclass
class ChatResult:
    content: list[dict[str, Any]]
    conversation_history: list[dict[str, Any]]
    usage: dict[str, Any]


def _accumulate_usage(total: dict[str, Any], usage: dict[str, Any]) -> None:
    for key in USAGE_COUNTERS:
        total[key] = (total.get(key) or 0) + (usage.get(key) or 0)


def _tool_result(tool_use_id: str, content: str, is_error: bool = False) -> dict[str, Any]:
    result: dict[str, Any] = {
        "type": "tool_result",
        "tool_use_id": tool_use_id,
        "content": content,
    }
    if is_error:
        result["is_error"] = True
    return result


class Assistant:
    """Runs one chat turn: model call, gateway tool calls, repeat until plain text."""

    def __init__(
        self,
        model: ModelClient,
        gateway: GatewayClient,
        catalog: ToolCatalog,
        max_tool_rounds: int = 10,
    ) -> None:
        self.model = model
        self.gateway = gateway
        self.catalog = catalog
        self.max_tool_rounds = max_tool_rounds

    async def call_tools(self, tool_uses: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """Forward each tool_use block to the gateway, one at a time.

        A failing tool becomes an ``is_error`` result so the model can react to
        it instead of the whole turn failing.
        """
        results: list[dict[str, Any]] = []
        for block in tool_uses:
            name = block.get("name", "")
            arguments = block.get("input") or {}
            logger.info("Calling gateway tool: %s", name)
            logger.info("with arguments: %s", json.dumps(arguments))
            try:
                output = await self.gateway.call_tool(name, arguments)
            except Exception as exc:
                logger.error("Tool call error for %s: %s", name, exc)
                results.append(
                    _tool_result(block["id"], f"Error calling tool {name}: {exc}", is_error=True)
                )
                continue

            content = json.dumps(output)
            logger.info("Gateway tool response: %s", content)
            results.append(_tool_result(block["id"], content))
        return results

    async def run(self, message: str, history: Sequence[dict[str, Any]] = ()) -> ChatResult:
        """
        Answer ``message`` given the prior conversation.

        Returns:
            The final assistant content, the history extended by the user
            message and that final answer (intermediate tool rounds are not
            included), and token usage summed over every model call.

        Raises:
            ModelAPIError: if any model call fails.
            ToolLoopLimitExceeded: if the model still wants tools after
                ``max_tool_rounds`` rounds.
        """
        tools = await self.catalog.ensure_loaded()

        user_message = {"role": "user", "content": message}
        messages = [*history, user_message]

        logger.info("Sending request to model with %d messages and %d tools", len(messages), len(tools))
        reply = await self.model.create(messages, tools)
        usage = dict(reply.usage)

        rounds = 0
        while reply.tool_uses:
            rounds += 1
            if rounds > self.max_tool_rounds:
                raise ToolLoopLimitExceeded(
                    f"Model requested tools for more than {self.max_tool_rounds} rounds"
                )

            logger.info("Processing %d tool calls (round %d)", len(reply.tool_uses), rounds)
            results = await self.call_tools(reply.tool_uses)
            messages = [
                *messages,
                {"role": "assistant", "content": reply.content},
                {"role": "user", "content": results},
            ]

            logger.info("Sending follow-up request to model")
            reply = await self.model.create(messages, tools)
            _accumulate_usage(usage, reply.usage)

        conversation_history = [
            *history,
            user_message,
            {"role": "assistant", "content": reply.content},
        ]
        return ChatResult(
            content=reply.content,
            conversation_history=conversation_history,
            usage=usage,
        )
