"""
Application settings loaded from environment variables.

Resolution order is environment variable, then values passed
to ``Settings(...)`` (the CLI passes its options this way),
then the ``.env`` file, then the field default. A container's
``PORT`` always wins over ``-p``; a stray ``.env`` never does.
"""

from __future__ import annotations

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_PORT: int = 9118
DEFAULT_HOST: str = "0.0.0.0"

_DIST_NAME = "duplicati-exporter"


class Settings(BaseSettings):
    """Runtime configuration for the exporter."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Duplicati Exporter"
    HOST: str = DEFAULT_HOST
    PORT: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            env_settings,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


def get_version() -> str:
    """Return the installed package version.

    Falls back to ``"0.0.0"`` when running from a source tree
    that was never installed.
    """
    try:
        return version(_DIST_NAME)
    except PackageNotFoundError:
        return "0.0.0"
