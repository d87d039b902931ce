"""Configuration resolution with precedence handling.

This module implements the resolution algorithm that merges configuration
from multiple sources according to the documented precedence order:
Programmatic > Environment > Project file > Home file > Defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

from .audit import SourceTracker
from .env_loader import EnvironmentConfigLoader
from .file_loader import ConfigFileError, FileConfigLoader
from .schema import default_values
from .types import ConfigOrigin, ResolvedConfig
from .validation import validate_config_dict

log = logging.getLogger(__name__)

PROFILE_ENV = "PATHSIFT_PROFILE"


class ConfigResolver:
    """Resolves configuration from multiple sources with proper precedence."""

    def __init__(self) -> None:
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources with proper precedence.

        Args:
            programmatic: Programmatic overrides (highest precedence)
            profile: Profile name to load from files
            use_env_file: Optional .env file to consult
            project_root: Directory to search for pyproject.toml

        Returns:
            ResolvedConfig with merged values and source tracking.

        Raises:
            ValueError: If environment values or the merged result are invalid.
            ConfigFileError: If the project file is malformed.
        """
        source_tracker = SourceTracker()
        merged_config: dict[str, Any] = {}

        if profile is None:
            profile = self.get_effective_profile()

        def apply(values: dict[str, Any], origin: ConfigOrigin) -> None:
            for field, value in values.items():
                if field in merged_config:  # Only override known fields
                    merged_config[field] = value
                    source_tracker.set_origin(field, origin)

        # Step 1: Start with schema defaults
        for field, value in default_values().items():
            merged_config[field] = value
            source_tracker.set_origin(field, "default")

        # Step 2: Home file; errors are non-fatal
        try:
            apply(self.file_loader.load_home_config(profile=profile), "file")
        except ConfigFileError as e:
            log.warning("Skipping home configuration: %s", e)

        # Step 3: Project file; only profile lookups may fail quietly
        try:
            apply(
                self.file_loader.load_project_config(
                    project_root=project_root, profile=profile
                ),
                "file",
            )
        except ConfigFileError as e:
            if profile is None:
                raise
            log.debug("Project profile %r unavailable: %s", profile, e)

        # Step 4: Environment variables
        try:
            apply(self.env_loader.load_env_config(env_file=use_env_file), "env")
        except (ValueError, FileNotFoundError) as e:
            raise ValueError(f"Environment configuration error: {e}") from e

        # Step 5: Programmatic overrides (highest precedence)
        if programmatic:
            apply(programmatic, "programmatic")

        # Step 6: Validate the final configuration
        final_config = validate_config_dict(merged_config)

        return ResolvedConfig(**final_config, origin=source_tracker.get_source_map())

    def validate_profile_exists(
        self, profile: str, project_root: Path | None = None
    ) -> tuple[bool, bool]:
        """Return (exists_in_project, exists_in_home)."""
        available_profiles = self.file_loader.list_available_profiles(project_root)
        return (
            profile in available_profiles["project"],
            profile in available_profiles["home"],
        )

    def get_effective_profile(self) -> str | None:
        return os.getenv(PROFILE_ENV) or None

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        return self.file_loader.list_available_profiles(project_root)
