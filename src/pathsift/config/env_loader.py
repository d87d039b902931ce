"""Environment variable configuration loading.

This module handles loading configuration from environment variables with
the PATHSIFT_ prefix, including optional .env file support via python-dotenv.
Process environment variables win over values from the file.
"""

import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError

from .schema import FIELD_NAMES, PathsiftSettings

ENV_PREFIX = "PATHSIFT_"


def env_var_for(field_name: str) -> str:
    return f"{ENV_PREFIX}{field_name.upper()}"


class EnvironmentConfigLoader:
    """Loads configuration from PATHSIFT_* variables and optional .env files."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Load configuration from environment variables.

        Args:
            env_file: Optional .env file consulted for variables that are not
                set in the process environment.

        Returns:
            Coerced values for the fields that are actually set (not defaults).

        Raises:
            FileNotFoundError: If ``env_file`` does not exist.
            ValueError: If environment variables contain invalid values.
        """
        environ = self._environment(env_file)

        raw = {
            field_name: environ[env_var_for(field_name)]
            for field_name in FIELD_NAMES
            if environ.get(env_var_for(field_name)) is not None
        }
        if not raw:
            return {}

        try:
            settings = PathsiftSettings(**raw)
        except ValidationError as e:
            env_var_list = [f"{env_var_for(name)}={value}" for name, value in raw.items()]
            raise ValueError(
                f"Invalid environment variable values: {', '.join(env_var_list)}. "
                f"Error: {e}"
            ) from e

        return {field_name: getattr(settings, field_name) for field_name in raw}

    @staticmethod
    def _environment(env_file: str | Path | None) -> dict[str, str | None]:
        if not env_file:
            return dict(os.environ)
        env_path = Path(env_file)
        if not env_path.exists():
            raise FileNotFoundError(f"Environment file not found: {env_path}")
        return {**dotenv_values(env_path), **os.environ}

    def get_env_summary(self) -> dict[str, str]:
        """Currently set PATHSIFT_* variables that map to configuration fields."""
        return {
            env_var_for(name): os.environ[env_var_for(name)]
            for name in FIELD_NAMES
            if env_var_for(name) in os.environ
        }
