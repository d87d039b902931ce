"""Pre-flight safety gate.

Before extraction runs, a document is checked against the configured limits.
Only the size limit is a hard block; line count, an estimated path count and a
count of "complex" constructs produce warnings and never stop the pipeline.
The two estimates are regex heuristics that may double-count overlapping
matches, so they are only ever compared against thresholds.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
import dataclasses
import inspect
import logging
import re
import time
from typing import TYPE_CHECKING, Any

from .constants import (
    COMPLEX_PATTERN_WARNING_THRESHOLD,
    DEFAULT_CANCEL_TIMEOUT_MS,
    PATH_COUNT_WARNING_THRESHOLD,
)
from .core.types import EnhancedError, SafetyResult
from .errors import create_enhanced_error, sanitize_error_message

if TYPE_CHECKING:
    from .config import FrozenConfig

log = logging.getLogger(__name__)

MESSAGE_PASSED = "Safety checks passed"
MESSAGE_OVERRIDE_APPROVED = "Safety override approved by user"

_PATH_SHAPES = (
    re.compile(r"/[^\s\"'<>|*?]+"),  # unix absolute
    re.compile(r"[A-Za-z]:\\[^\s\"'<>|*?]+"),  # windows absolute
    re.compile(r"\.\.?/[^\s\"'<>|*?]+"),  # relative
)
_QUOTED = re.compile(r"[\"'][^\"']*[\"']")

_COMPLEX_SHAPES = (
    re.compile(r"\{[^{}]*\{[^{}]*\}[^{}]*\}"),  # nested braces
    re.compile(r"\[[^\[\]]*\[[^\[\]]*\][^\[\]]*\]"),  # nested brackets
    re.compile(r"/[^/\n]+/[gimuy]*"),  # regex literals
    re.compile(r"`[^`]*\$\{[^}]*\}[^`]*`"),  # template interpolation
)


@dataclasses.dataclass(frozen=True, slots=True)
class SafetyCheckOptions:
    """Per-call adjustments to the safety gate.

    Custom thresholds replace the configured ones for this call only;
    ``path_count`` replaces the fixed path-estimate warning threshold.
    """

    show_progress: bool = False
    allow_override: bool = False
    file_size_bytes: int | None = None
    line_count: int | None = None
    path_count: int | None = None


def estimate_path_count(content: str) -> int:
    """Rough count of path-shaped substrings across four shapes."""
    total = sum(len(pattern.findall(content)) for pattern in _PATH_SHAPES)
    total += sum(1 for q in _QUOTED.findall(content) if "/" in q or "\\" in q)
    return total


def count_complex_patterns(content: str) -> int:
    return sum(len(pattern.findall(content)) for pattern in _COMPLEX_SHAPES)


def _file_size_error(
    size: int, threshold: int, document_name: str | None
) -> SafetyResult:
    error = create_enhanced_error(
        f"File size ({size} bytes) exceeds safety threshold ({threshold} bytes)",
        "safety",
        {"fileSize": size, "threshold": threshold, "fileName": document_name},
        recoverable=False,
        severity="high",
        suggestion=(
            "Consider splitting the file or increasing the safety threshold in settings"
        ),
    )
    return SafetyResult(proceed=False, message=error.user_message, error=error)


def _collect_warnings(
    content: str, config: FrozenConfig, options: SafetyCheckOptions
) -> list[str]:
    warnings = []

    line_threshold = (
        options.line_count
        if options.line_count is not None
        else config.safety_large_output_lines_threshold
    )
    line_count = len(content.split("\n"))
    if line_count > line_threshold:
        warnings.append(
            f"Large file detected: {line_count} lines (threshold: {line_threshold})"
        )

    path_threshold = (
        options.path_count
        if options.path_count is not None
        else PATH_COUNT_WARNING_THRESHOLD
    )
    estimated_paths = estimate_path_count(content)
    if estimated_paths > path_threshold:
        warnings.append(
            f"Large number of paths detected: estimated {estimated_paths} paths"
        )

    complex_patterns = count_complex_patterns(content)
    if complex_patterns > COMPLEX_PATTERN_WARNING_THRESHOLD:
        warnings.append(f"Complex patterns detected: {complex_patterns} patterns")

    return warnings


def handle_safety_checks(
    content: str,
    config: FrozenConfig,
    options: SafetyCheckOptions | None = None,
    *,
    document_name: str | None = None,
) -> SafetyResult:
    """Run the safety gate over document text.

    Args:
        content: Document text.
        config: Configuration snapshot (safety toggle and thresholds).
        options: Per-call threshold overrides.
        document_name: Recorded in the block error's context.

    Returns:
        ``proceed=False`` with a high-severity, non-recoverable ``safety`` error
        when the UTF-8 size exceeds the file-size threshold; otherwise
        ``proceed=True`` with any soft warnings.
    """
    if not config.safety_enabled:
        return SafetyResult(proceed=True, message="")

    options = options or SafetyCheckOptions()
    size_threshold = (
        options.file_size_bytes
        if options.file_size_bytes is not None
        else config.safety_file_size_warn_bytes
    )
    size = len(content.encode("utf-8"))
    if size > size_threshold:
        log.debug("Safety block: %d bytes > %d", size, size_threshold)
        return _file_size_error(size, size_threshold, document_name)

    warnings = _collect_warnings(content, config, options)
    if not warnings:
        return SafetyResult(proceed=True, message=MESSAGE_PASSED)
    log.debug("Safety warnings: %s", warnings)
    return SafetyResult(
        proceed=True,
        message=f"Safety checks passed with {len(warnings)} warnings",
        warnings=tuple(warnings),
    )


class SafetyOverrideSession:
    """Remembers which documents the user already allowed past a block."""

    def __init__(self) -> None:
        self._approved: set[str] = set()

    def is_approved(self, document_key: str) -> bool:
        return document_key in self._approved

    def approve(self, document_key: str) -> None:
        self._approved.add(document_key)

    def clear(self) -> None:
        self._approved.clear()


Confirm = Callable[[str], Awaitable[bool] | bool]


async def handle_safety_checks_with_user_confirmation(
    content: str,
    config: FrozenConfig,
    options: SafetyCheckOptions | None = None,
    *,
    confirm: Confirm,
    session: SafetyOverrideSession | None = None,
    document_key: str | None = None,
) -> SafetyResult:
    """Safety gate that lets the user override a hard block.

    ``confirm`` is only asked when ``options.allow_override`` is set and the
    document is not already approved in ``session``. An approved override keeps
    the block error attached for reporting but lets the pipeline proceed.
    """
    options = options or SafetyCheckOptions()
    result = handle_safety_checks(content, config, options, document_name=document_key)
    if result.proceed or not options.allow_override:
        return result

    if session is not None and document_key and session.is_approved(document_key):
        approved = True
    else:
        answer = confirm(result.message)
        approved = bool(await answer) if inspect.isawaitable(answer) else bool(answer)
        if approved and session is not None and document_key:
            session.approve(document_key)

    if not approved:
        return result
    log.info(
        "Safety override approved for %s",
        sanitize_error_message(document_key or "document"),
    )
    return dataclasses.replace(result, proceed=True, message=MESSAGE_OVERRIDE_APPROVED)


def should_cancel_operation(
    processed_items: int,
    threshold: int,
    start_time: float,
    max_time_ms: int = DEFAULT_CANCEL_TIMEOUT_MS,
) -> bool:
    """Coarse cancellation check for long batch loops.

    ``start_time`` is a ``time.monotonic()`` reading taken when the loop began.
    """
    elapsed_ms = (time.monotonic() - start_time) * 1000
    return processed_items > threshold or elapsed_ms > max_time_ms


def check_document_count(count: int, config: FrozenConfig) -> str | None:
    """Warning text when a batch holds more documents than configured."""
    threshold = config.safety_many_documents_threshold
    if config.safety_enabled and count > threshold:
        return f"Processing {count} documents (threshold: {threshold})"
    return None


def create_safety_warning(
    message: str, details: Mapping[str, Any] | None = None
) -> EnhancedError:
    """Recoverable, medium-severity safety error for soft limits."""
    return create_enhanced_error(
        message,
        "safety",
        dict(details or {}),
        severity="medium",
        recoverable=True,
        suggestion="Consider adjusting safety settings or breaking down the operation",
    )
