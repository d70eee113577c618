"""
Application settings using pydantic-settings.

Environment variables are prefixed with FHIR_GATEWAY_.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FHIR_GATEWAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("fhir_server_base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Require an absolute http(s) base address without a trailing slash."""
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError(
                "FHIR_GATEWAY_FHIR_SERVER_BASE_URL must be an absolute http(s) URL"
            )
        return value.rstrip("/")

    @property
    def cors_allow_credentials(self) -> bool:
        """Allow credentials only when specific origins are configured (not wildcard)."""
        return self.cors_origins != "*"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    log_remote_exchanges: bool = False  # Log every remote query and its outcome

    # Remote FHIR server
    fhir_server_base_url: str = "http://localhost:8080/fhir"
    request_timeout: int = 30  # Total aiohttp timeout per round trip, in seconds

    # CORS settings
    cors_origins: str = "*"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
