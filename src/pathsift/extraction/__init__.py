"""
Per-format path extraction
"""

from .extract import extract_paths, get_registry, unsupported_format_result
from .extractors import (
    BaseExtractor,
    CSSExtractor,
    CSVExtractor,
    DotenvExtractor,
    ExtractorRegistry,
    HTMLExtractor,
    JavaScriptExtractor,
    JSONExtractor,
    TOMLExtractor,
)
from .filetypes import (
    SUPPORTED_FORMATS,
    FileType,
    determine_file_type,
    language_id_for_path,
)
from .patterns import has_explicit_path_prefix, looks_like_path, position_at

__all__ = [
    "SUPPORTED_FORMATS",
    "BaseExtractor",
    "CSSExtractor",
    "CSVExtractor",
    "DotenvExtractor",
    "ExtractorRegistry",
    "FileType",
    "HTMLExtractor",
    "JSONExtractor",
    "JavaScriptExtractor",
    "TOMLExtractor",
    "determine_file_type",
    "extract_paths",
    "get_registry",
    "has_explicit_path_prefix",
    "language_id_for_path",
    "looks_like_path",
    "position_at",
    "unsupported_format_result",
]
