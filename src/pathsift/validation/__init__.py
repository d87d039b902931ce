"""
Path validation, normalization and canonical resolution
"""

from .paths import (
    detect_path_type,
    get_path_components,
    is_path_safe,
    is_url,
    is_valid_path,
    normalize_path,
    validate_path_format,
)
from .resolver import (
    PathResolutionOptions,
    ResolutionSummary,
    get_workspace_folder_for_path,
    resolve_path_canonical,
    resolve_paths_canonical,
    summarize_resolution,
)
from .validator import LocalFileStat, validate_path, validate_paths

__all__ = [
    "LocalFileStat",
    "PathResolutionOptions",
    "ResolutionSummary",
    "detect_path_type",
    "get_path_components",
    "get_workspace_folder_for_path",
    "is_path_safe",
    "is_url",
    "is_valid_path",
    "normalize_path",
    "resolve_path_canonical",
    "resolve_paths_canonical",
    "summarize_resolution",
    "validate_path",
    "validate_path_format",
    "validate_paths",
]
