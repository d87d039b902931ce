"""Path-shape heuristics shared by the format extractors.

Each extractor decides *where* to look; these helpers decide whether what it
found looks like a path, and where in the document it sits.
"""

from __future__ import annotations

import re

from ..core.types import ExtractedPath
from ..validation.paths import DRIVE_PATTERN, URL_PATTERN

_EXPLICIT_PREFIXES = ("./", "../", "/")
_DRIVE_PATH = re.compile(r"^[a-zA-Z]:[\\/]")


def has_explicit_path_prefix(value: str) -> bool:
    """Starts like a path: ``./``, ``../``, ``/``, a drive letter or a URL."""
    return (
        value.startswith(_EXPLICIT_PREFIXES)
        or bool(_DRIVE_PATH.match(value))
        or bool(URL_PATTERN.match(value))
    )


def looks_like_path(value: str) -> bool:
    """Loose shape test used for data formats (JSON, TOML, CSV, dotenv).

    A value qualifies if it carries a separator or an explicit path prefix.
    Multi-line values never qualify.
    """
    value = value.strip()
    if not value or "\n" in value or "\r" in value:
        return False
    if has_explicit_path_prefix(value) or bool(DRIVE_PATTERN.match(value)):
        return True
    return "/" in value or "\\" in value


def position_at(content: str, offset: int) -> tuple[int, int]:
    """1-based (line, column) of a character offset."""
    line = content.count("\n", 0, offset) + 1
    column = offset - (content.rfind("\n", 0, offset) + 1) + 1
    return line, column


def path_at(content: str, value: str, offset: int) -> ExtractedPath:
    line, column = position_at(content, offset)
    return ExtractedPath(value=value, line=line, column=column)


class ValueLocator:
    """Finds successive values in the source text, moving forward only.

    Used by extractors that parse first and then need positions; a value that
    cannot be found verbatim (because of escaping) is returned without one.
    """

    def __init__(self, content: str) -> None:
        self._content = content
        self._cursor = 0

    def locate(self, value: str, *encodings: str) -> ExtractedPath:
        for needle in (value, *encodings):
            if not needle:
                continue
            offset = self._content.find(needle, self._cursor)
            if offset != -1:
                self._cursor = offset + len(needle)
                return path_at(self._content, value, offset)
        return ExtractedPath(value=value)
