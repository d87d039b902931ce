"""Configuration management for pathsift.

Resolve-once, freeze-then-flow: ``resolve_config`` merges every source into
a ``ResolvedConfig`` (values plus origins), and ``to_frozen`` produces the
``FrozenConfig`` snapshot the pipeline reads.
"""

from .api import (
    check_environment,
    get_effective_profile,
    list_available_profiles,
    make_config,
    resolve_config,
    validate_profile,
)
from .audit import SourceTracker, summarize_origins
from .file_loader import ConfigFileError, FileConfigLoader
from .resolver import ConfigResolver
from .schema import PathsiftSettings
from .types import (
    ConfigOrigin,
    FrozenConfig,
    ResolutionSettings,
    ResolvedConfig,
    SafetySettings,
    SourceMap,
    ValidationSettings,
)
from .validation import ConfigValidationError, validate_config_dict

__all__ = [
    "ConfigFileError",
    "ConfigOrigin",
    "ConfigResolver",
    "ConfigValidationError",
    "FileConfigLoader",
    "FrozenConfig",
    "PathsiftSettings",
    "ResolutionSettings",
    "ResolvedConfig",
    "SafetySettings",
    "SourceMap",
    "SourceTracker",
    "ValidationSettings",
    "check_environment",
    "get_effective_profile",
    "list_available_profiles",
    "make_config",
    "resolve_config",
    "summarize_origins",
    "validate_config_dict",
    "validate_profile",
]
