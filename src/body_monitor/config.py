"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from body_monitor.domain.models import MEASUREMENT_WINDOW
from body_monitor.services.sessions import DEFAULT_MAX_SESSIONS

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    body_records_table: str = "body_records"
    measurement_window: int = Field(default=MEASUREMENT_WINDOW, ge=1)
    max_sessions: int = Field(default=DEFAULT_MAX_SESSIONS, ge=1)
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
