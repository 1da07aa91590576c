"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden by a LAZYREST_* environment variable
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults work out of the box for the demo server
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LAZYREST_", env_file=".env", case_sensitive=False,
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 8080

    # Dispatch
    request_timeout_seconds: float | None = None
    body_decode_error_status: int = 500

    @field_validator("body_decode_error_status")
    @classmethod
    def check_error_status(cls, v: int) -> int:
        """Decode failures must map to a 4xx or 5xx status."""
        if not 400 <= v <= 599:
            raise ValueError("body_decode_error_status must be 4xx or 5xx")
        return v

    # Demo service
    demo_prefix: str = "records"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
