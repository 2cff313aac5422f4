"""Custom pydantic-settings source for hashbang configuration.

YamlSettingsSource loads settings from a single YAML file:

1. ``HASHBANG_CONFIG_FILE`` if set (must exist)
2. ``hashbang.yaml`` in the current directory, if present

Environment variables and constructor arguments take precedence over the
file (see Settings.settings_customise_sources).
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

# Environment variable naming an explicit config file
ENV_CONFIG_FILE = "HASHBANG_CONFIG_FILE"

DEFAULT_CONFIG_FILENAME = "hashbang.yaml"


class ConfigFileError(Exception):
    """Raised when a config file cannot be read or is malformed."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def get_config_path() -> _pathlib.Path | None:
    """
    Determine which YAML config file to load.

    Returns:
        The path, or None if no config file applies.

    Raises:
        ConfigFileError: If HASHBANG_CONFIG_FILE names a missing file.
    """
    if explicit := _os.environ.get(ENV_CONFIG_FILE):
        path = _pathlib.Path(explicit)
        if not path.exists():
            raise ConfigFileError(path, f"file named by {ENV_CONFIG_FILE} not found")
        return path

    local = _pathlib.Path.cwd() / DEFAULT_CONFIG_FILENAME
    return local if local.exists() else None


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Load a YAML config file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed contents ({} for an empty file).

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or is not a mapping at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class YamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """Settings source reading one YAML file."""

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            config_path: Explicit file to load (for testing). If not
                provided, get_config_path() decides.
        """
        super().__init__(settings_cls)
        self._config_path = config_path if config_path is not None else get_config_path()
        self._data = load_yaml_file(self._config_path) if self._config_path else {}

    @property
    def config_path(self) -> _pathlib.Path | None:
        """The file that was loaded, if any."""
        return self._config_path

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """Get value for a field from the loaded file."""
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return the file contents for Pydantic validation."""
        return dict(self._data)
