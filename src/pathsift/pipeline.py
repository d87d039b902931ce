"""End-to-end extraction pipeline.

Document text and its language id go through, in order: file-type resolution
(unsupported formats stop here with a ``format`` error), the safety gate (a
hard block stops here), the format extractor, format and security validation,
separator normalization, optional canonical resolution, existence checks and
optional deduplication. Only an unsupported format and a safety block end a
run early; rejected paths become validation warnings on the result.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
import dataclasses
import logging
import time
from typing import TYPE_CHECKING, Any

from .constants import DEFAULT_CANCEL_TIMEOUT_MS
from .core.interfaces import DocumentSource, FileStat, Notifier
from .core.types import (
    ExtractedPath,
    ExtractionResult,
    ParseError,
    Position,
    SafetyResult,
    ValidationResult,
)
from .errors import sanitize_error_message
from .exceptions import SafetyThresholdError
from .extraction import FileType, determine_file_type, extract_paths
from .postprocess import dedupe_paths
from .reporting import ErrorHandler, LoggingNotifier
from .safety import (
    Confirm,
    SafetyCheckOptions,
    SafetyOverrideSession,
    check_document_count,
    create_safety_warning,
    handle_safety_checks,
    handle_safety_checks_with_user_confirmation,
    should_cancel_operation,
)
from .validation import (
    PathResolutionOptions,
    ResolutionSummary,
    is_path_safe,
    normalize_path,
    resolve_paths_canonical,
    summarize_resolution,
    validate_path_format,
    validate_paths,
)

if TYPE_CHECKING:
    from .config import FrozenConfig

log = logging.getLogger(__name__)

MESSAGE_UNSAFE = "Path points into a protected system location"
MESSAGE_NO_PATHS = "No paths found in the current document"


@dataclasses.dataclass(frozen=True, slots=True)
class PipelineResult:
    """Everything one pipeline run produced.

    ``paths`` is the final ordered list; ``warnings`` holds the non-fatal
    reports (rejected candidates). ``safety`` is None when the run stopped
    before the gate.
    """

    document: str
    file_type: FileType
    extraction: ExtractionResult
    safety: SafetyResult | None = None
    paths: tuple[str, ...] = ()
    warnings: tuple[ParseError, ...] = ()
    validation: tuple[ValidationResult, ...] = ()
    resolution: ResolutionSummary | None = None

    @property
    def blocked(self) -> bool:
        return self.safety is not None and not self.safety.proceed

    @property
    def success(self) -> bool:
        return self.extraction.success and not self.blocked


def _rejection(candidate: ExtractedPath, reason: str) -> ParseError:
    position = None
    if candidate.line is not None and candidate.column is not None:
        position = Position(candidate.line, candidate.column)
    return ParseError(
        category="validation",
        severity="warning",
        message=f"{candidate.value}: {reason}",
        recoverable=True,
        recovery_action="skip",
        position=position,
    )


def screen_paths(
    candidates: Sequence[ExtractedPath],
) -> tuple[list[str], list[ParseError]]:
    """Split candidates into normalized accepted values and rejection reports."""
    accepted: list[str] = []
    rejected: list[ParseError] = []
    for candidate in candidates:
        check = validate_path_format(candidate.value)
        if not check.is_valid:
            rejected.append(_rejection(candidate, ", ".join(check.errors)))
        elif not is_path_safe(candidate.value):
            rejected.append(_rejection(candidate, MESSAGE_UNSAFE))
        else:
            accepted.append(normalize_path(candidate.value))
    return accepted, rejected


async def _run_safety_gate(
    text: str,
    config: FrozenConfig,
    document: DocumentSource,
    options: SafetyCheckOptions | None,
    confirm: Confirm | None,
    session: SafetyOverrideSession | None,
) -> SafetyResult:
    if confirm is None:
        return handle_safety_checks(
            text, config, options, document_name=document.file_name
        )
    options = dataclasses.replace(options or SafetyCheckOptions(), allow_override=True)
    return await handle_safety_checks_with_user_confirmation(
        text,
        config,
        options,
        confirm=confirm,
        session=session,
        document_key=document.file_name,
    )


async def process_document(
    document: DocumentSource,
    config: FrozenConfig,
    *,
    notifier: Notifier | None = None,
    error_handler: ErrorHandler | None = None,
    stat: FileStat | None = None,
    workspace_folders: Sequence[str] = (),
    validate: bool = True,
    safety_options: SafetyCheckOptions | None = None,
    confirm: Confirm | None = None,
    session: SafetyOverrideSession | None = None,
    raise_on_block: bool = False,
) -> PipelineResult:
    """Run one document through the full pipeline.

    Args:
        document: Text and language id to process.
        config: Configuration snapshot for this run.
        notifier: Receives user-facing messages; logging-backed by default.
        error_handler: Receives soft safety warnings when given.
        stat: Stat capability for existence checks.
        workspace_folders: Roots for workspace-relative resolution.
        validate: Screen candidates with format and security validation.
        safety_options: Per-call safety thresholds.
        confirm: Asked whether to override a safety block; enables overrides.
        session: Remembers overrides per document across runs.
        raise_on_block: Raise ``SafetyThresholdError`` instead of returning a
            blocked result.

    Returns:
        A ``PipelineResult``; inspect ``success`` and ``blocked``.
    """
    notifier = notifier or LoggingNotifier()
    text = document.get_text()
    file_type = determine_file_type(document.language_id)

    if file_type is FileType.UNKNOWN:
        extraction = extract_paths(text, document.language_id)
        notifier.show_info(extraction.errors[0].message)
        return PipelineResult(
            document=document.file_name, file_type=file_type, extraction=extraction
        )

    if safety_options is not None and safety_options.show_progress:
        notifier.show_progress("Running safety checks...")
    safety = await _run_safety_gate(text, config, document, safety_options, confirm, session)
    if not safety.proceed:
        notifier.show_warning(safety.message)
        if raise_on_block:
            raise SafetyThresholdError(safety.message)
        return PipelineResult(
            document=document.file_name,
            file_type=file_type,
            extraction=ExtractionResult(success=True),
            safety=safety,
        )
    for warning in safety.warnings:
        if error_handler is not None:
            await error_handler.handle(create_safety_warning(warning))
        else:
            log.warning(sanitize_error_message(f"{document.file_name}: {warning}"))

    extraction = extract_paths(text, document.language_id)
    if not extraction.success:
        notifier.show_error(f"Failed to extract paths: {extraction.errors[0].message}")
        return PipelineResult(
            document=document.file_name,
            file_type=file_type,
            extraction=extraction,
            safety=safety,
        )
    if not extraction.paths:
        notifier.show_info(MESSAGE_NO_PATHS)

    if validate:
        accepted, rejected = screen_paths(extraction.paths)
    else:
        accepted, rejected = [normalize_path(v) for v in extraction.values], []
    for report in rejected:
        log.debug("Rejected %s", sanitize_error_message(report.message))

    results: list[str] = accepted
    summary = None
    if config.resolution.enabled:
        options = PathResolutionOptions(
            resolve_symlinks=config.resolve_symlinks,
            resolve_workspace_relative=config.resolve_workspace_relative,
        )
        results = await resolve_paths_canonical(
            accepted, options, workspace_folders=workspace_folders
        )
        summary = summarize_resolution(accepted, results)
        log.debug(
            "Resolved %d paths, %d fell back", summary.resolved, summary.fallback
        )

    validation: list[ValidationResult] = []
    if validate and config.validation_enabled:
        validation = await asyncio.to_thread(
            validate_paths,
            accepted,
            config,
            stat=stat,
            workspace_folders=workspace_folders,
        )

    if config.dedupe_enabled:
        results = dedupe_paths(results)

    return PipelineResult(
        document=document.file_name,
        file_type=file_type,
        extraction=extraction,
        safety=safety,
        paths=tuple(results),
        warnings=tuple(rejected),
        validation=tuple(validation),
        resolution=summary,
    )


async def process_documents(
    documents: Sequence[DocumentSource],
    config: FrozenConfig,
    *,
    max_items: int | None = None,
    max_time_ms: int = DEFAULT_CANCEL_TIMEOUT_MS,
    **kwargs: Any,
) -> list[PipelineResult]:
    """Process documents one after another.

    Warns when the batch exceeds the configured document count, and stops
    early once ``max_items`` documents are done or ``max_time_ms`` elapsed.
    Remaining keyword arguments go to ``process_document``.
    """
    notice = check_document_count(len(documents), config)
    if notice:
        notifier = kwargs.get("notifier") or LoggingNotifier()
        notifier.show_warning(notice)

    limit = max_items if max_items is not None else len(documents)
    start = time.monotonic()
    results: list[PipelineResult] = []
    for document in documents:
        if should_cancel_operation(len(results), limit - 1, start, max_time_ms):
            log.warning(
                "Stopping after %d of %d documents", len(results), len(documents)
            )
            break
        results.append(await process_document(document, config, **kwargs))
    return results


def process_document_sync(
    document: DocumentSource, config: FrozenConfig, **kwargs: Any
) -> PipelineResult:
    """Blocking wrapper around ``process_document`` for synchronous callers."""
    return asyncio.run(process_document(document, config, **kwargs))
