"""Runtime configuration for the Mapbox gateway service."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the Mapbox gateway service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Mapbox API
    mapbox_access_token: str = Field(..., alias="MAPBOX_ACCESS_TOKEN")
    mapbox_api_base_url: str = Field(default="https://api.mapbox.com", alias="MAPBOX_API_BASE_URL")
    request_timeout: float = Field(default=30.0, alias="MAPBOX_REQUEST_TIMEOUT")

    # FastAPI
    cors_origin: str = Field(default="*", alias="CORS_ORIGIN")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=3000, alias="PORT")
    debug: bool = Field(default=False, alias="DEBUG")


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
