from datetime import UTC, datetime
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = True
    cors_origins: list[str] = ["*"]

    ENVIRONMENT: str = "Production"

    # Spreadsheet automation (Apps Script web app)
    gsheet_get_url: str = ""
    gsheet_post_url: str = ""

    # Admin listing
    admin_password: str = ""
    admin_secret: str = ""

    # Event
    event_id: str = "boda-marielos-guillermo-2025"
    rsvp_deadline: datetime = datetime.fromisoformat("2025-11-16T06:00:00+00:00")
    rsvp_deadline_label: str = "15 de noviembre de 2025"
    default_guest_name: str = "Invitado/a"

    # RSVP client
    rsvp_api_base_url: str = "http://localhost:8000"
    http_timeout_seconds: float = 10.0
    deadline_poll_seconds: float = 60.0

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0

    @field_validator("rsvp_deadline")
    @classmethod
    def deadline_is_utc_aware(cls, v: datetime) -> datetime:
        # A deadline given without an offset is read as UTC.
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
