"""
pathsift - extract, validate and resolve file paths found in documents
"""

import importlib.metadata
import logging

from .config import FrozenConfig, ResolvedConfig, make_config, resolve_config
from .core.types import (
    EnhancedError,
    ExtractedPath,
    ExtractionResult,
    ParseError,
    PathComponents,
    PathFormatValidation,
    SafetyResult,
    ValidationResult,
)
from .documents import TextDocument, load_document
from .exceptions import (
    PathsiftError,
    PathValidationError,
    ResolutionError,
    SafetyThresholdError,
    UnsupportedFormatError,
)
from .extraction import FileType, determine_file_type, extract_paths
from .pipeline import (
    PipelineResult,
    process_document,
    process_document_sync,
    process_documents,
)
from .postprocess import dedupe_paths, sort_paths
from .safety import (
    SafetyCheckOptions,
    SafetyOverrideSession,
    handle_safety_checks,
    handle_safety_checks_with_user_confirmation,
    should_cancel_operation,
)
from .validation import (
    PathResolutionOptions,
    detect_path_type,
    get_path_components,
    is_path_safe,
    is_valid_path,
    normalize_path,
    resolve_path_canonical,
    resolve_paths_canonical,
    validate_path_format,
    validate_paths,
)

# Version handling
try:
    __version__ = importlib.metadata.version("pathsift")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Null handler so library use without logging configuration stays quiet
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "EnhancedError",
    "ExtractedPath",
    "ExtractionResult",
    "FileType",
    "FrozenConfig",
    "ParseError",
    "PathComponents",
    "PathFormatValidation",
    "PathResolutionOptions",
    "PathValidationError",
    "PathsiftError",
    "PipelineResult",
    "ResolutionError",
    "ResolvedConfig",
    "SafetyCheckOptions",
    "SafetyOverrideSession",
    "SafetyResult",
    "SafetyThresholdError",
    "TextDocument",
    "UnsupportedFormatError",
    "ValidationResult",
    "dedupe_paths",
    "detect_path_type",
    "determine_file_type",
    "extract_paths",
    "get_path_components",
    "handle_safety_checks",
    "handle_safety_checks_with_user_confirmation",
    "is_path_safe",
    "is_valid_path",
    "load_document",
    "make_config",
    "normalize_path",
    "process_document",
    "process_document_sync",
    "process_documents",
    "resolve_config",
    "resolve_path_canonical",
    "resolve_paths_canonical",
    "should_cancel_operation",
    "sort_paths",
    "validate_path_format",
    "validate_paths",
]
