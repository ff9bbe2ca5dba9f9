"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Workshop Journal"
    environment: str = _ENVIRONMENT
    storage_backend: str = "memory"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    upload_dir: str = "uploads"
    uploads_url_path: str = "/uploads"
    max_upload_bytes: int = 50 * 1024 * 1024
    allowed_media_types: str = "video/webm,audio/webm"
    api_base_url: str = "http://localhost:5000"
    capture_timeslice_ms: int = 1000
    query_cache_ttl_seconds: int = 300

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_media_types(raw: str | None) -> frozenset[str]:
    """Parse the comma-separated list of accepted upload MIME types."""
    if raw is None:
        return frozenset()
    types: set[str] = set()
    for chunk in raw.split(","):
        value = chunk.strip().lower()
        if value:
            types.add(value)
    return frozenset(types)
