"""Per-format path extractors with automatic selection by file type.

Every extractor scans raw text with targeted heuristics rather than a full
grammar. Malformed input never raises: the worst case is fewer candidates.
Results follow document order (line-major, then left to right).
"""

from abc import ABC, abstractmethod
from collections import Counter
import csv
import io
import json
import logging
import re
import tomllib
from typing import Any

from ..core.types import ExtractedPath
from ..exceptions import UnsupportedFormatError
from .filetypes import FileType
from .patterns import (
    ValueLocator,
    has_explicit_path_prefix,
    looks_like_path,
    path_at,
)

log = logging.getLogger(__name__)

_QUOTES = ('"', "'")


def _ordered(matches: list[tuple[int, str]], content: str) -> list[ExtractedPath]:
    """Sort (offset, value) pairs by offset, drop repeats at one offset."""
    seen: set[int] = set()
    paths = []
    for offset, value in sorted(matches, key=lambda m: m[0]):
        if offset in seen:
            continue
        seen.add(offset)
        paths.append(path_at(content, value, offset))
    return paths


class BaseExtractor(ABC):
    """Base class for format extractors"""

    file_types: tuple[FileType, ...] = ()

    def can_extract(self, file_type: FileType) -> bool:
        """Check if this extractor handles the file type"""
        return file_type in self.file_types

    def extract(self, content: str) -> list[ExtractedPath]:
        """Extract path candidates; empty content yields nothing"""
        if not content or not content.strip():
            return []
        return self._extract(content)

    @abstractmethod
    def _extract(self, content: str) -> list[ExtractedPath]:
        """Scan non-empty content"""


class JavaScriptExtractor(BaseExtractor):
    """Module specifiers from import, require and export-from statements.

    Only relative, absolute, drive-letter and URL specifiers count as paths;
    bare package names such as ``react`` are skipped.
    """

    file_types = (FileType.JAVASCRIPT, FileType.TYPESCRIPT)

    _PATTERNS = (
        # import x from '...', import type {...} from '...', export * from '...'
        re.compile(r"""\b(?:import|export)\b[^;'"`]*?\bfrom\s*(['"])([^'"\n]+)\1"""),
        # side-effect import '...'
        re.compile(r"""\bimport\s*(['"])([^'"\n]+)\1"""),
        # import('...') and require('...')
        re.compile(r"""\b(?:import|require)\s*\(\s*(['"`])([^'"`\n]+)\1\s*\)"""),
    )

    def _extract(self, content: str) -> list[ExtractedPath]:
        matches = []
        for pattern in self._PATTERNS:
            for match in pattern.finditer(content):
                specifier = match.group(2).strip()
                if specifier and has_explicit_path_prefix(specifier):
                    matches.append((match.start(2), specifier))
        return _ordered(matches, content)


class JSONExtractor(BaseExtractor):
    """Path-shaped string leaves of a JSON document (keys are ignored)"""

    file_types = (FileType.JSON,)

    # Keys are matched too (group 2) so the scan never restarts mid-token
    _STRING_TOKEN = re.compile(r'"((?:[^"\\\n]|\\.)*)"(\s*:)?')

    def _extract(self, content: str) -> list[ExtractedPath]:
        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            # JSONC comments and trailing commas land here
            log.debug("JSON parse failed, scanning string tokens: %s", e)
            return self._scan_tokens(content)

        # parsed leaves come in document order, so they pair off with value
        # tokens by a forward walk
        tokens = list(self._value_tokens(content))
        cursor = 0
        paths = []
        for value in self._string_leaves(document):
            if not looks_like_path(value):
                continue
            for index in range(cursor, len(tokens)):
                offset, token = tokens[index]
                if token == value:
                    cursor = index + 1
                    paths.append(path_at(content, value, offset))
                    break
            else:
                paths.append(ExtractedPath(value=value))
        return paths

    def _string_leaves(self, node: Any):
        if isinstance(node, str):
            yield node
        elif isinstance(node, dict):
            for child in node.values():
                yield from self._string_leaves(child)
        elif isinstance(node, list):
            for child in node:
                yield from self._string_leaves(child)

    def _value_tokens(self, content: str):
        """(offset, decoded value) of every string token that is not a key"""
        for match in self._STRING_TOKEN.finditer(content):
            if match.group(2):
                continue
            try:
                yield match.start(1), json.loads(match.group(0))
            except json.JSONDecodeError:
                continue

    def _scan_tokens(self, content: str) -> list[ExtractedPath]:
        return [
            path_at(content, value, offset)
            for offset, value in self._value_tokens(content)
            if looks_like_path(value)
        ]


class CSSExtractor(BaseExtractor):
    """``url(...)`` references and ``@import`` targets"""

    file_types = (FileType.CSS,)

    _URL = re.compile(r"""url\(\s*(['"]?)([^'")]*?)\1\s*\)""", re.IGNORECASE)
    _IMPORT = re.compile(r"""@import\s+(['"])([^'"\n]+)\1""", re.IGNORECASE)

    def _extract(self, content: str) -> list[ExtractedPath]:
        matches = []
        for pattern in (self._URL, self._IMPORT):
            for match in pattern.finditer(content):
                value = match.group(2).strip()
                if self._accept(value):
                    matches.append((match.start(2), value))
        return _ordered(matches, content)

    @staticmethod
    def _accept(value: str) -> bool:
        if not value or value.startswith("#"):
            return False
        return not value.lower().startswith("data:")


class HTMLExtractor(BaseExtractor):
    """Values of path-bearing attributes, including ``srcset`` lists"""

    file_types = (FileType.HTML,)

    ATTRIBUTES = (
        "src",
        "href",
        "data",
        "action",
        "poster",
        "cite",
        "background",
        "formaction",
        "manifest",
        "icon",
        "longdesc",
        "srcset",
        "data-src",
    )
    _EXCLUDED_SCHEMES = ("data:", "javascript:", "mailto:", "tel:")

    _ATTRIBUTE = re.compile(
        r"""(?<![\w-])(data-src|srcset|src|href|data|action|poster|cite"""
        r"""|background|formaction|manifest|icon|longdesc)"""
        r"""\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+))""",
        re.IGNORECASE,
    )

    def _extract(self, content: str) -> list[ExtractedPath]:
        matches = []
        for match in self._ATTRIBUTE.finditer(content):
            group = next(g for g in (2, 3, 4) if match.group(g) is not None)
            raw, start = match.group(group), match.start(group)
            if match.group(1).lower() == "srcset":
                candidates = self._split_srcset(raw, start)
            else:
                stripped = raw.strip()
                candidates = [(start + raw.find(stripped), stripped)] if stripped else []
            matches.extend(c for c in candidates if self._accept(c[1]))
        return _ordered(matches, content)

    @staticmethod
    def _split_srcset(raw: str, start: int) -> list[tuple[int, str]]:
        """``a.png 1x, b.png 2x`` -> [(offset, 'a.png'), (offset, 'b.png')]"""
        candidates = []
        cursor = 0
        for entry in raw.split(","):
            parts = entry.split()
            if parts:
                offset = raw.find(parts[0], cursor)
                candidates.append((start + offset, parts[0]))
            cursor += len(entry) + 1
        return candidates

    def _accept(self, value: str) -> bool:
        if not value or value.startswith("#"):
            return False
        return not value.lower().startswith(self._EXCLUDED_SCHEMES)


class CSVExtractor(BaseExtractor):
    """Path-shaped cells in any row or column.

    Quoted fields may hold commas and newlines; the csv module handles them.
    """

    file_types = (FileType.CSV,)

    def _extract(self, content: str) -> list[ExtractedPath]:
        locator = ValueLocator(content)
        paths = []
        reader = csv.reader(io.StringIO(content, newline=""))
        try:
            for row in reader:
                for cell in row:
                    value = cell.strip()
                    if looks_like_path(value):
                        paths.append(locator.locate(value))
        except csv.Error as e:
            log.debug("CSV scan stopped at line %d: %s", reader.line_num, e)
        return paths


class TOMLExtractor(BaseExtractor):
    """Path-shaped string values under any key, arrays and tables included"""

    file_types = (FileType.TOML,)

    _ASSIGNMENT = re.compile(r"^\s*[^#=\[]+?=\s*(.*)$")
    _STRING = re.compile(r"""(["'])((?:(?!\1)[^\\\n]|\\.)*)\1""")
    _KEY_END = re.compile(r"""["']\s*=""")

    def _extract(self, content: str) -> list[ExtractedPath]:
        try:
            document = tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            log.debug("TOML parse failed, scanning assignments: %s", e)
            return self._scan_lines(content)

        # tables may be declared out of nesting order, so each value is found
        # from the top of the document and the offsets decide the order
        counts = Counter(v for v in self._string_values(document) if looks_like_path(v))
        matches: list[tuple[int, str]] = []
        unlocated: list[str] = []
        for value, count in counts.items():
            offsets = self._occurrences(content, value, count)
            matches.extend((offset, value) for offset in offsets)
            unlocated.extend([value] * (count - len(offsets)))
        return _ordered(matches, content) + [ExtractedPath(value=v) for v in unlocated]

    def _occurrences(self, content: str, value: str, count: int) -> list[int]:
        """Offsets of up to ``count`` quoted occurrences of ``value`` used as values"""
        offsets: list[int] = []
        # basic strings escape backslashes
        for needle in dict.fromkeys((value, value.replace("\\", "\\\\"))):
            start = 0
            while len(offsets) < count:
                offset = content.find(needle, start)
                if offset == -1:
                    break
                start = offset + 1
                end = offset + len(needle)
                if (
                    content[offset - 1 : offset] in _QUOTES
                    and content[end : end + 1] in _QUOTES
                    and not self._KEY_END.match(content, end)
                    and offset not in offsets
                ):
                    offsets.append(offset)
        return offsets

    def _string_values(self, node: Any):
        if isinstance(node, str):
            yield node
        elif isinstance(node, dict):
            for child in node.values():
                yield from self._string_values(child)
        elif isinstance(node, list):
            for child in node:
                yield from self._string_values(child)

    def _scan_lines(self, content: str) -> list[ExtractedPath]:
        paths = []
        offset = 0
        for line in content.split("\n"):
            assignment = self._ASSIGNMENT.match(line)
            if assignment:
                for match in self._STRING.finditer(line, assignment.start(1)):
                    value = match.group(2)
                    if match.group(1) == '"':
                        value = value.replace("\\\\", "\\")
                    if looks_like_path(value):
                        paths.append(path_at(content, value, offset + match.start(2)))
            offset += len(line) + 1
        return paths


class DotenvExtractor(BaseExtractor):
    """``KEY=value`` lines whose value has path shape; quotes are stripped"""

    file_types = (FileType.DOTENV,)

    _LINE = re.compile(r"^\s*(?:export\s+)?[A-Za-z_][A-Za-z0-9_.\-]*\s*=\s*(.*?)\s*$")
    _INLINE_COMMENT = re.compile(r"\s+#.*$")

    def _extract(self, content: str) -> list[ExtractedPath]:
        paths = []
        offset = 0
        for line in content.split("\n"):
            match = self._LINE.match(line)
            if match and match.group(1):
                value, start = self._unquote(match.group(1), match.start(1))
                if looks_like_path(value):
                    paths.append(path_at(content, value, offset + start))
            offset += len(line) + 1
        return paths

    def _unquote(self, raw: str, start: int) -> tuple[str, int]:
        quote = raw[0]
        if quote in "\"'" and len(raw) > 1:
            end = raw.find(quote, 1)
            if end != -1:
                return raw[1:end], start + 1
        return self._INLINE_COMMENT.sub("", raw).strip(), start


class ExtractorRegistry:
    """Extractor registry with automatic selection by file type"""

    def __init__(self, custom_extractors: list[BaseExtractor] | None = None):
        """Initialize with the built-in extractors; custom ones take priority"""
        self.extractors: list[BaseExtractor] = [
            JavaScriptExtractor(),
            JSONExtractor(),
            CSSExtractor(),
            HTMLExtractor(),
            CSVExtractor(),
            TOMLExtractor(),
            DotenvExtractor(),
        ]
        if custom_extractors:
            self.extractors[:0] = custom_extractors

    def get(self, file_type: FileType) -> BaseExtractor:
        """Return the first extractor for the file type"""
        for extractor in self.extractors:
            if extractor.can_extract(file_type):
                return extractor
        raise UnsupportedFormatError(file_type.value)

    def register_extractor(self, extractor: BaseExtractor, priority: int = -1) -> None:
        """Add an extractor, optionally at a priority position"""
        if extractor not in self.extractors:
            if 0 <= priority < len(self.extractors):
                self.extractors.insert(priority, extractor)
            else:
                self.extractors.append(extractor)

    def get_supported_types(self) -> set[FileType]:
        return {ft for extractor in self.extractors for ft in extractor.file_types}
