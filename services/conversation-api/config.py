"""Application configuration loaded from environment variables."""

import os

from omi_common import DatabaseConfig
from pydantic import BaseModel


class AuthConfig(BaseModel, frozen=True):
    """Bearer token verification configuration."""

    jwt_secret: str
    algorithm: str = "HS256"


class TranscriptionConfig(BaseModel, frozen=True):
    """Transcription provider and retry policy configuration."""

    base_url: str = "https://api.gladia.io/v2/"
    request_timeout_seconds: float = 30.0
    poll_interval_seconds: float = 5.0
    max_polls: int = 120
    max_attempts: int = 3
    backoff_seconds: float = 5.0
    max_workers: int = 8
    single_flight: bool = True


class StorageConfig(BaseModel, frozen=True):
    """Object storage behaviour shared by every user bucket."""

    signed_url_ttl_minutes: int = 15
    default_content_type: str = "audio/mpeg"


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    database: DatabaseConfig
    auth: AuthConfig
    transcription: TranscriptionConfig
    storage: StorageConfig


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        database=DatabaseConfig(
            host=os.getenv("POSTGRES_HOST", "postgres"),
            port=os.getenv("POSTGRES_PORT", "5432"),
            user=os.getenv("POSTGRES_USER", ""),
            password=os.getenv("POSTGRES_PASSWORD", ""),
            database=os.getenv("POSTGRES_DB", "omi_friend"),
        ),
        auth=AuthConfig(
            jwt_secret=os.getenv("JWT_SECRET", ""),
        ),
        transcription=TranscriptionConfig(
            base_url=os.getenv("GLADIA_BASE_URL", "https://api.gladia.io/v2/"),
            poll_interval_seconds=float(
                os.getenv("TRANSCRIPTION_POLL_INTERVAL_SECONDS", "5")
            ),
            max_polls=int(os.getenv("TRANSCRIPTION_MAX_POLLS", "120")),
            max_attempts=int(os.getenv("TRANSCRIPTION_MAX_ATTEMPTS", "3")),
            backoff_seconds=float(os.getenv("TRANSCRIPTION_BACKOFF_SECONDS", "5")),
            max_workers=int(os.getenv("TRANSCRIPTION_MAX_WORKERS", "8")),
            single_flight=_env_bool("TRANSCRIPTION_SINGLE_FLIGHT", True),
        ),
        storage=StorageConfig(
            signed_url_ttl_minutes=int(os.getenv("SIGNED_URL_TTL_MINUTES", "15")),
        ),
    )
