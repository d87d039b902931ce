"""Core data types that flow through the extraction pipeline.

This module defines the immutable value types produced by extractors, the
validator, the safety gate and the error taxonomy. Every type is a frozen
dataclass; instances are built once (usually through the ``make_*`` builder
functions) and never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
import dataclasses
from datetime import UTC, datetime
import time
from types import MappingProxyType
import typing

# --- Literal vocabularies ---

ErrorCategory = typing.Literal[
    "parse",
    "parsing",
    "validation",
    "safety",
    "operational",
    "file-system",
    "configuration",
    "format",
]
ErrorSeverity = typing.Literal["info", "warning", "error", "critical"]
EnhancedSeverity = typing.Literal["low", "medium", "high"]
RecoveryAction = typing.Literal["skip", "retry", "abort", "fallback", "none"]
PathType = typing.Literal["absolute", "relative", "url"]
ValidationStatus = typing.Literal["valid", "invalid"]
Permissions = typing.Literal["read-write", "read-only", "write-only", "none"]

# --- Minimal guard helpers ---

T = typing.TypeVar("T")


def _freeze_mapping(
    m: Mapping[str, T] | None,
) -> Mapping[str, T] | None:
    """Return an immutable mapping view or None."""
    if m is None or isinstance(m, MappingProxyType):
        return m
    return MappingProxyType(dict(m))


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _check_literal(value: object, literal: typing.Any, field_name: str) -> None:
    allowed = typing.get_args(literal)
    _require(
        condition=value in allowed,
        message=f"must be one of {allowed}, got {value!r}",
        field_name=field_name,
    )


# --- Extraction ---


@dataclasses.dataclass(frozen=True, slots=True)
class ExtractedPath:
    """A path candidate found in a document.

    ``line`` and ``column`` are 1-based and only present when the extractor
    could locate the value in the source text.
    """

    value: str
    line: int | None = None
    column: int | None = None

    def __post_init__(self) -> None:
        _require(
            condition=isinstance(self.value, str),
            message="must be str",
            field_name="value",
            exc=TypeError,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class Position:
    """A 1-based line/column location."""

    line: int
    column: int


@dataclasses.dataclass(frozen=True, slots=True)
class ParseError:
    """Structured, non-raising error report attached to results."""

    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    recoverable: bool
    recovery_action: RecoveryAction
    timestamp: float = dataclasses.field(default_factory=time.time)
    context: str | None = None
    metadata: Mapping[str, typing.Any] | None = None
    filepath: str | None = None
    position: Position | None = None

    def __post_init__(self) -> None:
        _check_literal(self.category, ErrorCategory, "category")
        _check_literal(self.severity, ErrorSeverity, "severity")
        _check_literal(self.recovery_action, RecoveryAction, "recovery_action")
        object.__setattr__(self, "metadata", _freeze_mapping(self.metadata))


@dataclasses.dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Outcome of running one document through an extractor.

    A failed result never carries paths and always carries at least one error.
    """

    success: bool
    paths: tuple[ExtractedPath, ...] = ()
    errors: tuple[ParseError, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "paths", tuple(self.paths))
        object.__setattr__(self, "errors", tuple(self.errors))
        if not self.success:
            _require(
                condition=not self.paths,
                message="failed extraction cannot carry paths",
                field_name="paths",
            )
            _require(
                condition=bool(self.errors),
                message="failed extraction must carry at least one error",
                field_name="errors",
            )

    @property
    def values(self) -> list[str]:
        """Raw path strings in document order."""
        return [p.value for p in self.paths]


def make_extraction_success(paths: Iterable[ExtractedPath]) -> ExtractionResult:
    """Build a successful extraction result."""
    return ExtractionResult(success=True, paths=tuple(paths), errors=())


def make_extraction_failure(errors: Iterable[ParseError]) -> ExtractionResult:
    """Build a failed extraction result (no paths)."""
    return ExtractionResult(success=False, paths=(), errors=tuple(errors))


# --- Validation ---


@dataclasses.dataclass(frozen=True, slots=True)
class PathFormatValidation:
    """Every format rule a path violates, in rule order."""

    is_valid: bool
    errors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "errors", tuple(self.errors))
        _require(
            condition=self.is_valid == (not self.errors),
            message="is_valid must agree with the error list",
            field_name="is_valid",
        )


@dataclasses.dataclass(frozen=True, slots=True)
class PathComponents:
    """Directory / filename split of a path."""

    directory: str
    filename: str
    basename: str
    extension: str


@dataclasses.dataclass(frozen=True, slots=True)
class ValidationResult:
    """Validation verdict for one path.

    ``resolved_path`` is only set when canonical resolution changed the value.
    """

    path: str
    status: ValidationStatus
    error: str | None = None
    exists: bool | None = None
    resolved_path: str | None = None
    permissions: Permissions | None = None

    def __post_init__(self) -> None:
        _check_literal(self.status, ValidationStatus, "status")
        if self.permissions is not None:
            _check_literal(self.permissions, Permissions, "permissions")
        _require(
            condition=self.resolved_path != self.path,
            message="only set when resolution changed the value",
            field_name="resolved_path",
        )

    @property
    def is_valid(self) -> bool:
        return self.status == "valid"


# --- Enhanced errors and recovery ---


@dataclasses.dataclass(frozen=True, slots=True)
class EnhancedError:
    """An error enriched with a user-facing message, suggestion and severity."""

    category: ErrorCategory
    original_error: BaseException
    message: str
    user_friendly_message: str
    suggestion: str
    recoverable: bool
    severity: EnhancedSeverity
    timestamp: datetime = dataclasses.field(
        default_factory=lambda: datetime.now(UTC),
    )
    context: Mapping[str, typing.Any] | None = None

    def __post_init__(self) -> None:
        _check_literal(self.category, ErrorCategory, "category")
        _check_literal(self.severity, EnhancedSeverity, "severity")
        object.__setattr__(self, "context", _freeze_mapping(self.context))

    @property
    def user_message(self) -> str:
        return self.user_friendly_message


@dataclasses.dataclass(frozen=True, slots=True)
class ErrorRecoveryOptions:
    """Retry policy derived from an error's category."""

    retryable: bool
    max_retries: int
    retry_delay: int  # milliseconds
    fallback_action: Callable[[], Awaitable[None]] | None = None
    user_action: str | None = None


# --- Safety ---


@dataclasses.dataclass(frozen=True, slots=True)
class SafetyResult:
    """Verdict of the pre-flight safety gate.

    A blocked result always carries its error and never carries warnings.
    """

    proceed: bool
    message: str
    warnings: tuple[str, ...] = ()
    error: EnhancedError | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "warnings", tuple(self.warnings))
        if not self.proceed:
            _require(
                condition=self.error is not None,
                message="blocked result must carry an error",
                field_name="error",
            )
            _require(
                condition=not self.warnings,
                message="blocked result cannot carry warnings",
                field_name="warnings",
            )
