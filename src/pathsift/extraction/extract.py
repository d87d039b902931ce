"""Format-aware extraction entry point"""

import logging

from ..core.types import ExtractionResult, make_extraction_failure, make_extraction_success
from ..errors import create_error, error_from_exception
from ..exceptions import UnsupportedFormatError
from .extractors import ExtractorRegistry
from .filetypes import SUPPORTED_FORMATS, FileType, determine_file_type

log = logging.getLogger(__name__)

_registry = ExtractorRegistry()


def get_registry() -> ExtractorRegistry:
    """The shared registry used by ``extract_paths``"""
    return _registry


def unsupported_format_result(language_id: str) -> ExtractionResult:
    """Failure result reported (never retried) for a format without an extractor"""
    error = create_error(
        category="format",
        severity="info",
        message=(
            f"Path extraction is not supported for {language_id} files. "
            "Supported formats: CSV, TOML, ENV, JS, TS, JSON, HTML, CSS."
        ),
        recoverable=False,
        recovery_action="none",
        context=f"File type: {language_id}",
        metadata={
            "languageId": language_id,
            "supportedFormats": list(SUPPORTED_FORMATS),
        },
    )
    return make_extraction_failure([error])


def extract_paths(
    content: str,
    language_id: str,
    *,
    registry: ExtractorRegistry | None = None,
) -> ExtractionResult:
    """Extract path candidates from document text.

    Args:
        content: Raw document text.
        language_id: Host language identifier (``json``, ``typescriptreact``...).
        registry: Extractor registry; the shared one when omitted.

    Returns:
        A successful result with paths in document order, or a failure carrying
        exactly one ``format`` error when the language id is unsupported.
    """
    file_type = determine_file_type(language_id)
    if file_type is FileType.UNKNOWN:
        log.info("No extractor for language id %r", language_id)
        return unsupported_format_result(language_id)

    registry = registry or _registry
    try:
        extractor = registry.get(file_type)
    except UnsupportedFormatError:
        return unsupported_format_result(language_id)

    try:
        paths = extractor.extract(content)
    except Exception as e:
        log.exception("%s extractor failed", file_type.value)
        return make_extraction_failure([error_from_exception(e)])

    log.debug("Extracted %d path candidates from %s content", len(paths), file_type.value)
    return make_extraction_success(paths)
