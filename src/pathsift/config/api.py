"""Public API for the configuration system.

This module provides the main entry points for configuration resolution,
including the resolve_config() function and profile management utilities.
"""

from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .schema import default_values
from .types import FrozenConfig, ResolvedConfig
from .validation import validate_config_dict

# Global resolver instance for efficient reuse
_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Sources merge as Programmatic > Environment > Project file > Home file >
    Defaults. The result is immutable; resolve again to pick up changes.

    Args:
        programmatic: Overrides with the highest precedence. Only known
                     configuration fields are used.
        profile: Profile name to load from configuration files. If None,
                uses PATHSIFT_PROFILE if set.
        use_env_file: Optional .env file consulted for PATHSIFT_* values.
        project_root: Directory to search for pyproject.toml. If None,
                     searches current directory and parents.

    Returns:
        ResolvedConfig with merged values and source tracking for audit.

    Raises:
        ValueError: If validation fails or environment variables are invalid.
        ConfigFileError: If the project configuration file is malformed.

    Example:
        config = resolve_config({"resolve_symlinks": True})
        frozen = config.to_frozen()
    """
    return _resolver.resolve(
        programmatic=programmatic,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def make_config(**overrides: Any) -> FrozenConfig:
    """Build a frozen configuration from defaults and overrides only.

    No files or environment variables are consulted, which makes this the
    convenient choice for library callers and tests.
    """
    values = default_values()
    values.update(overrides)
    return FrozenConfig(**validate_config_dict(values))


def list_available_profiles(project_root: Path | None = None) -> dict[str, list[str]]:
    """List profile names from the project and home configuration files."""
    return _resolver.list_available_profiles(project_root)


def get_effective_profile() -> str | None:
    """Profile name from PATHSIFT_PROFILE, or None."""
    return _resolver.get_effective_profile()


def validate_profile(profile: str, project_root: Path | None = None) -> dict[str, bool]:
    """Check that a profile exists in at least one configuration file.

    Raises:
        ValueError: If the profile doesn't exist in any configuration file.
    """
    exists_in_project, exists_in_home = _resolver.validate_profile_exists(
        profile, project_root
    )

    if not exists_in_project and not exists_in_home:
        available = list_available_profiles(project_root)
        all_profiles = available["project"] + available["home"]
        raise ValueError(
            f"Profile '{profile}' not found. Available profiles: {all_profiles}"
        )

    return {"project": exists_in_project, "home": exists_in_home}


def check_environment() -> dict[str, str]:
    """Currently set PATHSIFT_* configuration variables."""
    return _resolver.env_loader.get_env_summary()
