"""Best-effort canonical path resolution.

Resolution follows symlinks and rewrites paths relative to the workspace
folder that contains them. It never fails: when anything goes wrong (missing
target, link cycle, permission error) the original string comes back
unchanged, and callers detect the fallback by comparing strings.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
import dataclasses
import logging
import os
from pathlib import Path

from ..errors import sanitize_error_message
from ..exceptions import ResolutionError
from .paths import detect_path_type

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class PathResolutionOptions:
    """What canonical resolution should do for one path."""

    resolve_symlinks: bool = True
    resolve_workspace_relative: bool = True
    workspace_folder: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ResolutionSummary:
    """How many paths in a batch changed versus fell back to the original."""

    resolved: int
    fallback: int


def get_workspace_folder_for_path(
    path: str, workspace_folders: Sequence[str | os.PathLike[str]]
) -> str | None:
    """Return the deepest workspace folder containing ``path``.

    Relative paths belong to the first folder, if there is one.
    """
    if not workspace_folders:
        return None
    if not os.path.isabs(path):
        return os.fspath(workspace_folders[0])

    target = Path(os.path.abspath(path))
    best: Path | None = None
    for folder in workspace_folders:
        root = Path(os.path.abspath(folder))
        if target == root or root in target.parents:
            if best is None or len(root.parts) > len(best.parts):
                best = root
    return str(best) if best is not None else None


def _resolve(path: str, options: PathResolutionOptions) -> str:
    workspace = Path(options.workspace_folder) if options.workspace_folder else None
    candidate = Path(path)
    if not candidate.is_absolute() and workspace is not None:
        candidate = workspace / candidate

    if options.resolve_symlinks:
        # strict: a missing target or a link loop raises
        candidate = candidate.resolve(strict=True)
        if workspace is not None:
            workspace = workspace.resolve(strict=True)

    if options.resolve_workspace_relative and workspace is not None:
        try:
            return candidate.relative_to(workspace).as_posix() or "."
        except ValueError:
            log.debug(
                sanitize_error_message(f"{candidate} is outside workspace {workspace}")
            )

    # unchanged unless a symlink was followed
    return str(candidate) if options.resolve_symlinks else path


def resolve_path_canonical(
    path: str,
    options: PathResolutionOptions | None = None,
    *,
    strict: bool = False,
) -> str:
    """Resolve a path to its canonical form, or return it unchanged.

    Args:
        path: The extracted path.
        options: Resolution toggles and the owning workspace folder.
        strict: Raise ``ResolutionError`` instead of falling back.

    Returns:
        The resolved path, or ``path`` itself when resolution is disabled, the
        path is a URL, or resolution failed.
    """
    options = options or PathResolutionOptions()
    if not (options.resolve_symlinks or options.resolve_workspace_relative):
        return path
    if not path or detect_path_type(path) == "url":
        return path

    try:
        return _resolve(path, options)
    except (OSError, RuntimeError, ValueError) as e:
        # RuntimeError: symlink loops on older interpreters
        if strict:
            raise ResolutionError(f"Could not resolve {path}: {e}") from e
        log.debug(
            sanitize_error_message(f"Canonical resolution fell back for {path}: {e}")
        )
        return path


async def resolve_paths_canonical(
    paths: Sequence[str],
    options: PathResolutionOptions | None = None,
    *,
    workspace_folders: Sequence[str | os.PathLike[str]] = (),
) -> list[str]:
    """Resolve a batch of paths concurrently, preserving input order.

    Each path runs in a worker thread with its own workspace folder (looked up
    from ``workspace_folders`` when ``options`` does not pin one).
    """
    options = options or PathResolutionOptions()

    def _options_for(path: str) -> PathResolutionOptions:
        if options.workspace_folder or not workspace_folders:
            return options
        folder = get_workspace_folder_for_path(path, workspace_folders)
        return dataclasses.replace(options, workspace_folder=folder)

    tasks = [
        asyncio.to_thread(resolve_path_canonical, path, _options_for(path))
        for path in paths
    ]
    return list(await asyncio.gather(*tasks))


def summarize_resolution(
    originals: Sequence[str], resolved: Sequence[str]
) -> ResolutionSummary:
    """Count paths that changed versus those that fell back."""
    changed = sum(1 for a, b in zip(originals, resolved, strict=True) if a != b)
    return ResolutionSummary(resolved=changed, fallback=len(originals) - changed)
