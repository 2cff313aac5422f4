"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with HASHBANG_ prefix
3. .env file (if HASHBANG_ENV_FILE is set)
4. YAML config file (HASHBANG_CONFIG_FILE or ./hashbang.yaml)
5. Built-in defaults (hashbang.constants)

Example:
    HASHBANG_SEPARATOR="#" HASHBANG_COALESCE_DELAY_MS=100
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import hashbang.config.sources as sources
import hashbang.constants as constants


def _get_env_file() -> str | None:
    """Return HASHBANG_ENV_FILE if it names an existing file."""
    if env_file := _os.environ.get("HASHBANG_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    hashbang configuration settings.

    All settings can be overridden via environment variables with the
    HASHBANG_ prefix, e.g. HASHBANG_HISTORY_MODE=push.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="HASHBANG_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (HASHBANG_* env vars)
        3. dotenv_settings (.env file)
        4. yaml_settings (hashbang.yaml)
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlSettingsSource(settings_cls),
            file_secret_settings,
        )

    @classmethod
    def construct_without_files(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from arguments and environment only.

        Skips .env and YAML files. Useful for test isolation and for
        embedding where files are not wanted.
        """
        return _EnvOnlySettings(_env_file=None, **kwargs)  # type: ignore[call-arg]

    separator: str = _pydantic.Field(
        default=constants.DEFAULT_SEPARATOR,
        description="Fragment prefix required by parse and emitted by serialize",
    )

    coalesce_delay_ms: int = _pydantic.Field(
        default=constants.DEFAULT_COALESCE_DELAY_MS,
        ge=0,
        description="Delay before an internal change is announced",
    )

    history_mode: _typing.Literal["replace", "push"] = _pydantic.Field(
        default=constants.DEFAULT_HISTORY_MODE,
        description="Whether internal commits replace or push history entries",
    )

    log_level: str = _pydantic.Field(
        default="WARNING",
        description="Level for the hashbang loggers",
    )

    @_pydantic.field_validator("separator")
    @classmethod
    def _validate_separator(cls, value: str) -> str:
        if not value:
            raise ValueError("separator must not be empty")
        if len(value) > 2:
            raise ValueError("separator must be one or two characters")
        return value

    @_pydantic.field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(_logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def coalesce_delay(self) -> float:
        """Coalescing delay in seconds."""
        return self.coalesce_delay_ms / 1000.0

    @property
    def replace_history(self) -> bool:
        """Whether internal commits replace the current history entry."""
        return self.history_mode == "replace"


class _EnvOnlySettings(Settings):
    """Settings variant that ignores the YAML config file."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings)
