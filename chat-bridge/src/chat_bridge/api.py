from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from .agent import Assistant, ToolLoopLimitExceeded
from .model_client import ModelAPIError
from .schemas import ChatResponse, HealthResponse, ToolsResponse
from .tool_catalog import ToolCatalog

router = APIRouter()

logger = logging.getLogger(__name__)

MODEL_ERROR_RESPONSES = {
    401: "Invalid API key",
    429: "Rate limit exceeded",
}


def get_catalog(request: Request) -> ToolCatalog:
    return request.app.state.catalog


def get_assistant(request: Request) -> Assistant:
    return request.app.state.assistant


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/health", response_model=HealthResponse)
async def healthcheck(catalog: ToolCatalog = Depends(get_catalog)) -> HealthResponse:
    return HealthResponse(tools_loaded=len(catalog))


@router.get("/api/tools", response_model=ToolsResponse)
async def list_tools(catalog: ToolCatalog = Depends(get_catalog)) -> ToolsResponse:
    return ToolsResponse(tools=list(catalog.snapshot))


@router.post("/api/chat", response_model=ChatResponse)
async def chat(request: Request, assistant: Assistant = Depends(get_assistant)):
    """
    Run one chat turn through the model and the gateway tools.

    The body is read by hand so that validation failures produce the
    service's own ``{"error": ...}`` messages.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    message = body.get("message")
    if not message or not isinstance(message, str):
        return _error(status.HTTP_400_BAD_REQUEST, "Message is required and must be a string")

    history = body.get("conversationHistory")
    if history is None:
        history = []
    if not isinstance(history, list):
        return _error(status.HTTP_400_BAD_REQUEST, "conversationHistory must be an array")

    logger.info("Chat request: %d chars, %d history messages", len(message), len(history))
    try:
        result = await assistant.run(message, history)
    except ModelAPIError as exc:
        logger.error("Chat error (status %s): %s", exc.status_code, exc)
        if exc.status_code in MODEL_ERROR_RESPONSES:
            return _error(exc.status_code, MODEL_ERROR_RESPONSES[exc.status_code])
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to process chat message")
    except ToolLoopLimitExceeded as exc:
        logger.error("Chat error: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Tool call limit exceeded")
    except Exception as exc:
        logger.exception("Chat error: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to process chat message")

    return ChatResponse(
        response=result.content,
        conversation_history=result.conversation_history,
        usage=result.usage,
    )
