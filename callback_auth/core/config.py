"""
Callback Authentication Configuration
Environment variables and settings management
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, List, Optional

import httpx
from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from callback_auth.core.exceptions import ConfigurationError

CALLBACK_AUTH_URI_PROPERTY = "callback-auth-uri"
CALLBACK_USE_MOCK_SERVICE_PROPERTY = "callback-use-mock-service"

# Name of the file, within the configuration home, holding the default record
DEFAULT_RECORD_FILENAME = "callback-default-response.json"


class Settings(BaseSettings):
    """Callback authentication settings with environment variable support"""

    # Application
    ENVIRONMENT: str = Field(default="development", description="Application environment")
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    SERVICE_NAME: str = Field(default="callback-auth", description="Service name attached to every log entry")

    # Callback
    CALLBACK_AUTH_URI: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CALLBACK_AUTH_URI", CALLBACK_AUTH_URI_PROPERTY),
        description="URI of the HTTP callback consulted for every login",
    )
    CALLBACK_USE_MOCK_SERVICE: bool = Field(
        default=False,
        validation_alias=AliasChoices("CALLBACK_USE_MOCK_SERVICE", CALLBACK_USE_MOCK_SERVICE_PROPERTY),
        description="Skip the callback and always answer with the default record",
    )
    CALLBACK_AUTH_HOME: str = Field(
        default="/etc/callback-auth",
        description="Directory holding the default record file",
    )
    CALLBACK_DEFAULT_RECORD_CACHE: bool = Field(
        default=False,
        description="Cache the parsed default record until the file changes",
    )

    # Monitoring and Metrics
    METRICS_ENABLED: bool = Field(default=True, description="Expose Prometheus metrics")

    # CORS
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(default=[], description="CORS allowed origins")

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value"""
        allowed = ["development", "staging", "production", "test"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("CALLBACK_AUTH_URI", mode="before")
    @classmethod
    def blank_uri_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once; malformed values are fatal configuration errors."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


class ConfigurationService:
    """Read-only accessor over the callback settings."""

    def __init__(self, settings: Settings):
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings

    def callback_uri(self) -> str:
        """
        Return the configured callback URI.

        Raises:
            ConfigurationError: the property is missing or is not an
                absolute http(s) URI.
        """
        value = self._settings.CALLBACK_AUTH_URI
        if value is None:
            raise ConfigurationError(
                f'Property "{CALLBACK_AUTH_URI_PROPERTY}" is required.',
                property_name=CALLBACK_AUTH_URI_PROPERTY,
            )

        try:
            uri = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ConfigurationError(
                f'Property "{CALLBACK_AUTH_URI_PROPERTY}" must be a valid URI.',
                property_name=CALLBACK_AUTH_URI_PROPERTY,
            ) from exc

        if uri.scheme not in ("http", "https") or not uri.host:
            raise ConfigurationError(
                f'Property "{CALLBACK_AUTH_URI_PROPERTY}" must be a valid URI.',
                property_name=CALLBACK_AUTH_URI_PROPERTY,
            )
        return value

    def use_mock_service(self) -> bool:
        return self._settings.CALLBACK_USE_MOCK_SERVICE

    def default_record_path(self) -> Path:
        return Path(self._settings.CALLBACK_AUTH_HOME) / DEFAULT_RECORD_FILENAME
