"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supabase_anon_key: str | None = None
    functions_base_url: str | None = None
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_store: bool = False
    guest_storage_path: str = ".opener_studio/guest_session.json"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_functions_base_url(settings: Settings) -> str:
    """Return the base URL for serverless function calls."""
    if settings.functions_base_url:
        return settings.functions_base_url.rstrip("/")
    return f"{settings.supabase_url.rstrip('/')}/functions/v1"
