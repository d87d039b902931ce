"""Error categorization, severity, recovery policy and message sanitization.

Every component reports problems through the vocabulary defined here:
a category (what went wrong), a severity (how bad), and a recovery action
(what the caller should do next). Messages are sanitized before they are
logged or shown so user directories and credentials never leak.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
import re
from typing import Any

from .constants import (
    FILE_SYSTEM_MAX_RETRIES,
    FILE_SYSTEM_RETRY_DELAY_MS,
    LOG_PREFIX,
    OPERATIONAL_MAX_RETRIES,
    OPERATIONAL_RETRY_DELAY_MS,
)
from .core.types import (
    EnhancedError,
    EnhancedSeverity,
    ErrorCategory,
    ErrorRecoveryOptions,
    ErrorSeverity,
    ParseError,
    Position,
    RecoveryAction,
)

log = logging.getLogger(__name__)

_USER_MESSAGES: dict[str, str] = {
    "file-system": "File system error: {0}",
    "configuration": "Configuration error: {0}",
    "validation": "Path validation failed: {0}",
    "safety": "Safety threshold exceeded: {0}",
    "operational": "Path extraction failed: {0}",
    "format": "Unsupported format: {0}",
}

_SUGGESTIONS: dict[str, str] = {
    "parse": "Check the path format and ensure values are valid",
    "parsing": "Check the path format and ensure values are valid",
    "file-system": "Check file permissions and ensure the file exists",
    "configuration": "Reset to default settings or check configuration syntax",
    "validation": "Review path values and ensure they meet validation criteria",
    "safety": "Reduce file size or adjust safety thresholds",
    "operational": "Try again or check system resources",
}
_DEFAULT_SUGGESTION = (
    "Check the logs for more details and consider reporting this issue"
)

_SANITIZERS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"/Users/[^/]+/"), "/Users/***/"),
    (re.compile(r"/home/[^/]+/"), "/home/***/"),
    (re.compile(r"C:\\Users\\[^\\]+\\"), r"C:\\Users\\***\\"),
    (re.compile(r"password[=:]\s*\S+", re.IGNORECASE), "password=***"),
    (re.compile(r"token[=:]\s*\S+", re.IGNORECASE), "token=***"),
    (re.compile(r"key[=:]\s*\S+", re.IGNORECASE), "key=***"),
)


# --- Classification ---


def categorize_error(error: BaseException | str) -> ErrorCategory:
    """Classify an error by keywords in its lower-cased message.

    Checked in priority order: parse/syntax, validation/invalid,
    permission/access, config/setting, safety/threshold; anything else is
    operational.
    """
    message = str(error).lower()

    if "parse" in message or "syntax" in message:
        return "parsing"
    if "validation" in message or "invalid" in message:
        return "validation"
    if "permission" in message or "access" in message:
        return "file-system"
    if "config" in message or "setting" in message:
        return "configuration"
    if "safety" in message or "threshold" in message:
        return "safety"
    return "operational"


def determine_severity(
    error: BaseException | str, category: ErrorCategory
) -> ErrorSeverity:
    """Map an error and its category onto the coarse severity scale."""
    message = str(error).lower()

    if "critical" in message or "fatal" in message:
        return "critical"
    if "error" in message or category == "file-system":
        return "error"
    if "warning" in message or category == "validation":
        return "warning"
    return "info"


def determine_recovery_action(
    category: ErrorCategory, severity: ErrorSeverity
) -> RecoveryAction:
    """Pick what a caller should do about an error."""
    if category == "file-system" and severity == "error":
        return "retry"
    if category in ("parsing", "validation"):
        return "skip"
    if severity == "critical":
        return "abort"
    return "fallback"


def is_error_recoverable(error: BaseException | str, category: ErrorCategory) -> bool:
    """Default recoverability when the caller does not decide explicitly."""
    message = str(error)

    if category in ("parse", "parsing", "configuration", "validation"):
        return True
    if category == "file-system":
        return "permission" in message or "network" in message
    if category == "operational":
        return "fatal" not in message
    # safety and format need an explicit override
    return False


# --- Builders ---


def create_error(
    *,
    category: ErrorCategory,
    severity: ErrorSeverity,
    message: str,
    recoverable: bool,
    recovery_action: RecoveryAction,
    context: str | None = None,
    metadata: Mapping[str, Any] | None = None,
) -> ParseError:
    """Create a generic structured error."""
    return ParseError(
        category=category,
        severity=severity,
        message=message,
        recoverable=recoverable,
        recovery_action=recovery_action,
        context=context,
        metadata=metadata,
    )


def create_parse_error(
    message: str,
    *,
    filepath: str | None = None,
    position: Position | tuple[int, int] | None = None,
) -> ParseError:
    """Create a recoverable parsing error; the caller skips the candidate."""
    if isinstance(position, tuple):
        position = Position(*position)
    return ParseError(
        category="parsing",
        severity="warning",
        message=message,
        recoverable=True,
        recovery_action="skip",
        filepath=filepath,
        position=position,
    )


def error_from_exception(error: BaseException) -> ParseError:
    """Classify an arbitrary exception into a structured error."""
    category = categorize_error(error)
    severity = determine_severity(error, category)
    return create_error(
        category=category,
        severity=severity,
        message=sanitize_error_message(str(error)),
        recoverable=is_error_recoverable(error, category),
        recovery_action=determine_recovery_action(category, severity),
    )


def create_enhanced_error(
    error: BaseException | str,
    category: ErrorCategory,
    context: Mapping[str, Any] | None = None,
    *,
    recoverable: bool | None = None,
    severity: EnhancedSeverity | None = None,
    suggestion: str | None = None,
) -> EnhancedError:
    """Wrap an error with a user-friendly message and recovery hint.

    Args:
        error: The underlying exception (or its message).
        category: Taxonomy category for the error.
        context: Optional structured details; a ``filepath`` entry is used in
            the user message for parse errors.
        recoverable: Override for the category default.
        severity: Enhanced-scale severity, ``medium`` when omitted.
        suggestion: Override for the per-category suggestion.

    Returns:
        A frozen ``EnhancedError``.
    """
    if isinstance(error, str):
        error = Exception(error)

    filepath = context.get("filepath") if context else None
    return EnhancedError(
        category=category,
        original_error=error,
        message=str(error),
        user_friendly_message=_build_user_message(error, category, filepath),
        suggestion=suggestion or _SUGGESTIONS.get(category, _DEFAULT_SUGGESTION),
        recoverable=(
            recoverable
            if recoverable is not None
            else is_error_recoverable(error, category)
        ),
        severity=severity or "medium",
        context=context,
    )


def _build_user_message(
    error: BaseException, category: ErrorCategory, filepath: object
) -> str:
    if category in ("parse", "parsing"):
        return f"Failed to parse path values: {filepath or 'unknown file'}"
    template = _USER_MESSAGES.get(category, "Unknown error: {0}")
    return template.format(error)


def build_error_recovery_options(error: EnhancedError) -> ErrorRecoveryOptions:
    """Translate an error's category into a concrete retry policy."""
    if error.category == "file-system":
        return ErrorRecoveryOptions(
            retryable=True,
            max_retries=FILE_SYSTEM_MAX_RETRIES,
            retry_delay=FILE_SYSTEM_RETRY_DELAY_MS,
        )
    if error.category == "operational":
        return ErrorRecoveryOptions(
            retryable=True,
            max_retries=OPERATIONAL_MAX_RETRIES,
            retry_delay=OPERATIONAL_RETRY_DELAY_MS,
        )
    if error.category == "configuration":
        return ErrorRecoveryOptions(
            retryable=False,
            max_retries=0,
            retry_delay=0,
            fallback_action=_fall_back_to_default_configuration,
            user_action="Reset to default settings",
        )
    return ErrorRecoveryOptions(retryable=False, max_retries=0, retry_delay=0)


async def _fall_back_to_default_configuration() -> None:
    # Configuration is resolved fresh per operation; dropping the bad
    # snapshot is all a fallback needs to do.
    log.info("Falling back to default configuration")


# --- Sanitization and reporting ---


def sanitize_error_message(message: str) -> str:
    """Strip user directory names and credential assignments from a message."""
    for pattern, replacement in _SANITIZERS:
        message = pattern.sub(replacement, message)
    return message


def handle_error(error: EnhancedError) -> None:
    """Log an enhanced error at a level matching its recoverability."""
    sanitized = sanitize_error_message(error.user_friendly_message)
    if error.recoverable:
        log.warning("%s %s", LOG_PREFIX, sanitized)
        return
    log.error("%s %s", LOG_PREFIX, sanitized)
