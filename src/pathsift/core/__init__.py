"""Core value types and capability protocols."""

from .interfaces import (
    ConfigSource,
    DocumentSource,
    ErrorLogger,
    FileStat,
    FileStatInfo,
    Notifier,
    OutputSink,
)
from .types import (
    EnhancedError,
    ErrorRecoveryOptions,
    ExtractedPath,
    ExtractionResult,
    ParseError,
    PathComponents,
    PathFormatValidation,
    Position,
    SafetyResult,
    ValidationResult,
    make_extraction_failure,
    make_extraction_success,
)

__all__ = [
    "ConfigSource",
    "DocumentSource",
    "EnhancedError",
    "ErrorLogger",
    "ErrorRecoveryOptions",
    "ExtractedPath",
    "ExtractionResult",
    "FileStat",
    "FileStatInfo",
    "Notifier",
    "OutputSink",
    "ParseError",
    "PathComponents",
    "PathFormatValidation",
    "Position",
    "SafetyResult",
    "ValidationResult",
    "make_extraction_failure",
    "make_extraction_success",
]
