from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .prompts import DEFAULT_SYSTEM_PROMPT


class Settings(BaseSettings):
    """Runtime configuration for the chat bridge."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    anthropic_api_key: str = Field(..., alias="ANTHROPIC_API_KEY")
    anthropic_model: str = Field(default="claude-sonnet-4-20250514", alias="ANTHROPIC_MODEL")
    max_tokens: int = Field(default=2000, alias="MAX_TOKENS")
    model_timeout: float = Field(default=60.0, alias="MODEL_TIMEOUT")

    # Mapbox gateway
    gateway_url: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("GATEWAY_URL", "MCP_SERVER_URL"),
    )
    tools_timeout: float = Field(default=10.0, alias="GATEWAY_TOOLS_TIMEOUT")
    tool_call_timeout: float = Field(default=15.0, alias="GATEWAY_TOOL_CALL_TIMEOUT")

    # Upper bound on model -> tool -> model rounds within one chat request
    max_tool_rounds: int = Field(default=10, alias="MAX_TOOL_ROUNDS")

    # Per-client limit on /api/ requests
    rate_limit_requests: int = Field(default=100, alias="RATE_LIMIT_REQUESTS")
    rate_limit_window_seconds: float = Field(default=15 * 60, alias="RATE_LIMIT_WINDOW_SECONDS")

    # FastAPI configuration
    cors_origin: str = Field(default="*", alias="CORS_ORIGIN")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=3001, alias="PORT")
    debug: bool = Field(default=False, alias="DEBUG")

    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, alias="SYSTEM_PROMPT")


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings so multiple imports share a single instance."""

    return Settings()  # type: ignore[arg-type]
