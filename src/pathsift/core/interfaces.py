"""Capability protocols the core consumes but never implements itself.

The host (an editor, the CLI, a test) supplies these. Implementations for
local use live in ``pathsift.documents`` and ``pathsift.reporting``.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathsift.config import FrozenConfig
    from pathsift.core.types import EnhancedError

FileKind = Literal["file", "directory", "symlink", "other", "missing"]


@dataclasses.dataclass(frozen=True, slots=True)
class FileStatInfo:
    """Result of a stat call; a failed stat is ``exists=False``."""

    exists: bool
    size: int = 0
    kind: FileKind = "missing"
    readable: bool = False
    writable: bool = False


@runtime_checkable
class DocumentSource(Protocol):
    """Read-only view of a document handed to the pipeline."""

    @property
    def language_id(self) -> str: ...

    @property
    def file_name(self) -> str: ...

    def get_text(self) -> str: ...


@runtime_checkable
class ConfigSource(Protocol):
    """Supplies a fresh configuration snapshot per operation."""

    def get_configuration(self) -> FrozenConfig: ...


@runtime_checkable
class FileStat(Protocol):
    """Filesystem stat capability used only by existence checks."""

    def stat(self, path: str) -> FileStatInfo: ...


@runtime_checkable
class OutputSink(Protocol):
    """Line-oriented output channel."""

    def append_line(self, line: str) -> None: ...


@runtime_checkable
class Notifier(Protocol):
    """User-facing notification capability."""

    def show_error(self, message: str, details: str | None = None) -> None: ...
    def show_warning(self, message: str, details: str | None = None) -> None: ...
    def show_info(self, message: str, details: str | None = None) -> None: ...
    def show_progress(self, message: str) -> None: ...


@runtime_checkable
class ErrorLogger(Protocol):
    """Structured logging capability for enhanced errors."""

    def log(self, message: str, level: Literal["info", "warn", "error"]) -> None: ...
    def log_error(self, error: EnhancedError) -> None: ...
    def log_warning(
        self, message: str, context: dict[str, Any] | None = None
    ) -> None: ...
    def log_info(self, message: str, context: dict[str, Any] | None = None) -> None: ...
