"""Configuration management for readhook."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_SERVICE_NAME = "CatalogService"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="READHOOK_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service
    service_name: str = Field(default=DEFAULT_SERVICE_NAME, description="Name of the application service")
    data_file: Path | None = Field(default=None, description="YAML file mapping entity names to rows")

    # Plugins
    plugins: Annotated[list[str], NoDecode] = Field(
        default_factory=list, description="Extra plugins as module:attribute specs"
    )
    load_entrypoints: bool = Field(default=True, description="Load plugins from the 'readhook' entry point group")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")

    @field_validator("plugins", mode="before")
    @classmethod
    def _split_plugins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("service_name")
    @classmethod
    def _require_service_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("service_name must not be empty")
        return value


def get_settings(**overrides: Any) -> Settings:
    """Get application settings.

    Args:
        overrides: Explicit values taking precedence over environment and .env

    Returns:
        Settings instance
    """
    return Settings(**{key: value for key, value in overrides.items() if value is not None})
