"""File-based configuration loading with profile support.

This module handles loading configuration from TOML files, supporting both
project-level (``[tool.pathsift]`` in pyproject.toml) and home-level
(~/.config/pathsift.toml) configuration with named profiles.

Nested tables are flattened, so these two spellings are equivalent::

    [tool.pathsift]
    safety_enabled = false

    [tool.pathsift.safety]
    enabled = false
"""

import os
from pathlib import Path
import tomllib
from typing import Any

CONFIG_HOME_ENV = "PATHSIFT_CONFIG_HOME"
HOME_CONFIG_NAME = "pathsift.toml"


class ConfigFileError(Exception):
    """Raised when configuration file loading fails."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


def flatten_config(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested tables into ``section_key`` field names."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}_{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten_config(value, name))
        else:
            flat[name] = value
    return flat


def _select_profile(
    section: dict[str, Any], profile: str | None, source: Path
) -> dict[str, Any]:
    if profile:
        profiles = section.get("profiles", {})
        if profile not in profiles:
            available = list(profiles.keys()) if profiles else []
            raise ConfigFileError(
                source,
                f"Profile '{profile}' not found. Available profiles: {available}",
            )
        return flatten_config(dict(profiles[profile]))
    config = dict(section)
    config.pop("profiles", None)
    return flatten_config(config)


class FileConfigLoader:
    """Loads configuration from TOML files with profile support."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load configuration from the nearest pyproject.toml.

        Args:
            project_root: Directory to start searching from. If None,
                         searches current directory and parents.
            profile: Optional profile name to load from
                    ``[tool.pathsift.profiles.<name>]``.

        Returns:
            Flattened configuration values, empty when there is no file or no
            ``[tool.pathsift]`` section.

        Raises:
            ConfigFileError: If the file exists but cannot be parsed, or the
                profile is missing.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if not pyproject_path:
            return {}

        data = self._read(pyproject_path)
        section = data.get("tool", {}).get("pathsift", {})
        if not section:
            return {}
        return _select_profile(section, profile, pyproject_path)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load configuration from the home file (empty if it does not exist).

        Raises:
            ConfigFileError: If the file exists but cannot be parsed, or the
                profile is missing.
        """
        home_config_path = self._get_home_config_path()
        if not home_config_path.exists():
            return {}

        data = self._read(home_config_path)
        return _select_profile(data, profile, home_config_path)

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        """List profile names from the project and home files.

        Unreadable files contribute no profiles.
        """
        profiles: dict[str, list[str]] = {"project": [], "home": []}

        pyproject_path = self._find_pyproject_toml(project_root)
        if pyproject_path:
            try:
                data = self._read(pyproject_path)
            except ConfigFileError:
                data = {}
            section = data.get("tool", {}).get("pathsift", {})
            profiles["project"] = list(section.get("profiles", {}).keys())

        home_config_path = self._get_home_config_path()
        if home_config_path.exists():
            try:
                data = self._read(home_config_path)
            except ConfigFileError:
                data = {}
            profiles["home"] = list(data.get("profiles", {}).keys())

        return profiles

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        try:
            with path.open(mode="rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        """Find pyproject.toml by searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()
        while True:
            pyproject_path = current / "pyproject.toml"
            if pyproject_path.exists():
                return pyproject_path
            if current == current.parent:
                return None
            current = current.parent

    def _get_home_config_path(self) -> Path:
        """``$PATHSIFT_CONFIG_HOME/pathsift.toml`` or ``~/.config/pathsift.toml``"""
        config_home = os.environ.get(CONFIG_HOME_ENV)
        if config_home:
            return Path(config_home) / HOME_CONFIG_NAME
        return Path.home() / ".config" / HOME_CONFIG_NAME
