"""Produce ``ValidationResult``s for extracted paths.

Validation runs format checks first, lets URLs through without touching the
filesystem, optionally resolves canonical paths, and finally checks existence
through the injected stat capability. A failed stat means "does not exist",
never a pipeline failure.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
import os
from typing import TYPE_CHECKING

from ..core.interfaces import FileStat, FileStatInfo
from ..core.types import Permissions, ValidationResult
from ..errors import sanitize_error_message
from ..exceptions import PathValidationError
from .paths import detect_path_type, is_valid_path, validate_path_format
from .resolver import (
    PathResolutionOptions,
    get_workspace_folder_for_path,
    resolve_path_canonical,
)

if TYPE_CHECKING:
    from ..config import FrozenConfig

log = logging.getLogger(__name__)


class LocalFileStat:
    """``FileStat`` backed by the local filesystem."""

    def stat(self, path: str) -> FileStatInfo:
        try:
            st = os.stat(path)
        except (OSError, ValueError):
            return FileStatInfo(exists=False)

        if os.path.islink(path):
            kind = "symlink"
        elif os.path.isdir(path):
            kind = "directory"
        elif os.path.isfile(path):
            kind = "file"
        else:
            kind = "other"
        return FileStatInfo(
            exists=True,
            size=st.st_size,
            kind=kind,
            readable=os.access(path, os.R_OK),
            writable=os.access(path, os.W_OK),
        )


def _permissions(info: FileStatInfo) -> Permissions:
    if info.readable and info.writable:
        return "read-write"
    if info.readable:
        return "read-only"
    if info.writable:
        return "write-only"
    return "none"


def _invalid(path: str, error: str) -> ValidationResult:
    return ValidationResult(path=path, status="invalid", error=error)


def _resolve_if_needed(
    path: str, config: FrozenConfig, workspace_folder: str | None
) -> str:
    if not config.validation_enabled:
        return path
    if not (config.resolve_symlinks or config.resolve_workspace_relative):
        return path
    options = PathResolutionOptions(
        resolve_symlinks=config.resolve_symlinks,
        resolve_workspace_relative=config.resolve_workspace_relative,
        workspace_folder=workspace_folder,
    )
    return resolve_path_canonical(path, options)


def validate_path(
    path: str,
    config: FrozenConfig,
    *,
    stat: FileStat | None = None,
    workspace_folders: Sequence[str] = (),
) -> ValidationResult:
    """Validate a single path according to the configuration snapshot."""
    format_check = validate_path_format(path)
    if not format_check.is_valid:
        return _invalid(path, ", ".join(format_check.errors))

    if not is_valid_path(path):
        return _invalid(path, "Path contains invalid characters or reserved names")

    if detect_path_type(path) == "url":
        return ValidationResult(path=path, status="valid", exists=True)

    workspace_folder = get_workspace_folder_for_path(path, workspace_folders)
    resolved = _resolve_if_needed(path, config, workspace_folder)
    resolved_path = resolved if resolved != path else None

    if not config.validation_check_existence:
        return ValidationResult(
            path=path,
            status="valid",
            exists=True,
            resolved_path=resolved_path,
            permissions="read-write" if config.validation_check_permissions else None,
        )

    target = resolved
    if workspace_folder and not os.path.isabs(target):
        target = os.path.join(workspace_folder, target)
    info = (stat or LocalFileStat()).stat(target)
    if not info.exists:
        log.debug("Path does not exist: %s", sanitize_error_message(target))
        return ValidationResult(
            path=path,
            status="valid",
            error="Path does not exist",
            exists=False,
            resolved_path=resolved_path,
        )

    return ValidationResult(
        path=path,
        status="valid",
        exists=True,
        resolved_path=resolved_path,
        permissions=_permissions(info) if config.validation_check_permissions else None,
    )


def validate_paths(
    paths: Sequence[str],
    config: FrozenConfig,
    *,
    stat: FileStat | None = None,
    workspace_folders: Sequence[str] = (),
    strict: bool = False,
) -> list[ValidationResult]:
    """Validate paths in order.

    Args:
        paths: Path strings to validate.
        config: Configuration snapshot (validation and resolution toggles).
        stat: Stat capability; the local filesystem when omitted.
        workspace_folders: Roots used for workspace-relative resolution.
        strict: Raise ``PathValidationError`` on the first invalid path.
    """
    stat = stat or LocalFileStat()
    results: list[ValidationResult] = []
    for path in paths:
        result = validate_path(
            path, config, stat=stat, workspace_folders=workspace_folders
        )
        if strict and not result.is_valid:
            raise PathValidationError(f"{path}: {result.error}")
        results.append(result)
    return results
