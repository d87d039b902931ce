"""Path format validation, security classification and normalization.

Format validation and security classification are independent checks:
``validate_path_format`` reports every structural rule a path breaks, while
``is_path_safe`` decides whether a path may escape its root or point into a
sensitive system tree. A path can pass the first and fail the second.
"""

from __future__ import annotations

import re

from ..constants import MAX_PATH_LENGTH, SENSITIVE_PATH_PREFIXES, WINDOWS_RESERVED_NAMES
from ..core.types import PathComponents, PathFormatValidation, PathType

URL_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")
DRIVE_PATTERN = re.compile(r"^[a-zA-Z]:")

# Control characters are rejected with the Windows-illegal set
_INVALID_CHARS = re.compile(r'[<>:"|?*\x00-\x1f]')
_SEPARATORS = re.compile(r"[\\/]")
_TRAVERSAL_SEGMENT = re.compile(r"(?:^|[\\/])\.\.(?:[\\/]|$)")
_REPEATED_SLASHES = re.compile(r"/{2,}")

ERROR_EMPTY = "Path is empty"
ERROR_INVALID_CHARACTERS = "Path contains invalid characters"
ERROR_RESERVED_NAMES = "Path contains reserved names"
ERROR_TRAVERSAL = "Path contains traversal sequence (..)"
ERROR_TOO_LONG = f"Path exceeds maximum length of {MAX_PATH_LENGTH} characters"


def is_url(path: str) -> bool:
    return bool(URL_PATTERN.match(path))


def _strip_allowed_prefix(path: str) -> str:
    """Drop a URL scheme or drive letter so their colon is not flagged."""
    match = URL_PATTERN.match(path) or DRIVE_PATTERN.match(path)
    return path[match.end() :] if match else path


def _has_invalid_characters(path: str) -> bool:
    return bool(_INVALID_CHARS.search(_strip_allowed_prefix(path)))


def _has_reserved_segment(path: str) -> bool:
    segments = _SEPARATORS.split(_strip_allowed_prefix(path))
    return any(segment.upper() in WINDOWS_RESERVED_NAMES for segment in segments)


def validate_path_format(path: str) -> PathFormatValidation:
    """Check a path against every structural rule.

    Rules are independent, so one path may collect several errors. An empty
    (or blank) path only reports emptiness.
    """
    if not path or not path.strip():
        return PathFormatValidation(is_valid=False, errors=(ERROR_EMPTY,))

    errors: list[str] = []
    if _has_invalid_characters(path):
        errors.append(ERROR_INVALID_CHARACTERS)
    if _has_reserved_segment(path):
        errors.append(ERROR_RESERVED_NAMES)
    if ".." in path:
        errors.append(ERROR_TRAVERSAL)
    if len(path) > MAX_PATH_LENGTH:
        errors.append(ERROR_TOO_LONG)

    return PathFormatValidation(is_valid=not errors, errors=tuple(errors))


def is_valid_path(path: str) -> bool:
    """Character, reserved-name and length check without traversal rules."""
    if not path or not path.strip():
        return False
    if len(path) > MAX_PATH_LENGTH:
        return False
    return not (_has_invalid_characters(path) or _has_reserved_segment(path))


def is_path_safe(path: str) -> bool:
    """Reject traversal segments and paths rooted in sensitive system trees.

    Only the root of the path is compared against the deny-list, so
    ``/home/user/etc/config.json`` is safe while ``/etc/passwd`` is not.
    """
    if not path or not path.strip():
        return False
    if _TRAVERSAL_SEGMENT.search(path):
        return False

    candidate = path.replace("\\", "/").lower()
    candidate = _REPEATED_SLASHES.sub("/", candidate)
    for prefix in SENSITIVE_PATH_PREFIXES:
        if candidate.startswith(prefix) or candidate == prefix.rstrip("/"):
            return False
    return True


def normalize_path(path: str) -> str:
    """Canonicalize separators.

    Backslashes become forward slashes, repeated slashes collapse to one and a
    single trailing slash is removed unless the path is the root. The ``://``
    of a URL is left intact.
    """
    scheme = ""
    match = URL_PATTERN.match(path)
    if match:
        scheme, path = path[: match.end()], path[match.end() :]

    normalized = _REPEATED_SLASHES.sub("/", path.replace("\\", "/"))
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized[:-1]
    return scheme + normalized


def detect_path_type(path: str) -> PathType:
    """Classify a path as ``url``, ``absolute`` or ``relative``.

    UNC paths (``\\\\server\\share``) fall through to ``relative``.
    """
    if is_url(path):
        return "url"
    if path.startswith("/") or DRIVE_PATTERN.match(path):
        return "absolute"
    return "relative"


def get_path_components(path: str) -> PathComponents:
    """Split a path into directory, filename, basename and extension.

    The extension is whatever follows the last dot of the filename, without the
    dot; it is empty when the filename has no dot.
    """
    cut = max(path.rfind("/"), path.rfind("\\"))
    if cut == -1:
        directory, filename = "", path
    else:
        directory = path[:cut] or path[0]
        filename = path[cut + 1 :]

    dot = filename.rfind(".")
    if dot == -1:
        return PathComponents(
            directory=directory, filename=filename, basename=filename, extension=""
        )
    return PathComponents(
        directory=directory,
        filename=filename,
        basename=filename[:dot],
        extension=filename[dot + 1 :],
    )
