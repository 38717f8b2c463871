"""Configuration for the shortlinks service.

Every field can be set through an environment variable of the same name
(case-insensitive) or a ``.env`` file, e.g. ``STORE_BACKEND=redis``.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

STORE_BACKENDS = ("memory", "file", "redis")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config(BaseSettings):
    """Application configuration."""

    # Storage
    store_backend: str = Field("file", description="Key-value backend: memory, file or redis")
    store_path: str = Field("./data/shortlinks.json", description="JSON file for the file backend")
    redis_url: Optional[str] = Field(None, description="Connection URL for the redis backend")
    key_prefix: str = Field("shortlinks:", description="Prepended to the records and analytics keys")

    # HTTP server
    host: str = Field("0.0.0.0", description="Interface to bind")
    port: int = Field(9200, description="Port to listen on")
    base_url: str = Field("http://localhost:9200", description="Used for short URLs when the request carries no host")
    path_prefix: str = Field("", description="Path segment before the code, e.g. 's' for /s/abc123")

    # Short links
    short_code_length: int = Field(6, ge=3, le=20, description="Length of generated codes")
    enable_custom_codes: bool = Field(True, description="Accept user-chosen codes")
    max_collision_retries: int = Field(5, ge=1, description="Random draws before the UUID fallback")
    max_batch_size: int = Field(5, ge=1, description="Most URLs accepted in one submission")
    default_validity_minutes: int = Field(30, ge=1, le=1440, description="Validity when none is given")
    geolocation_timeout_seconds: float = Field(5.0, gt=0, description="Wait bound for a client location")

    # Logging
    log_level: str = Field("INFO", description="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    log_file: Optional[str] = Field(None, description="Also log to this file")
    log_json: bool = Field(False, description="JSON-shaped log lines")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("store_backend")
    @classmethod
    def _known_backend(cls, value: str) -> str:
        value = value.lower()
        if value not in STORE_BACKENDS:
            raise ValueError(f"store_backend must be one of {', '.join(STORE_BACKENDS)}")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value


def load_config() -> Config:
    """Load configuration from the environment."""
    return Config()
