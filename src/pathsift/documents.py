"""Local implementations of the document and configuration capabilities"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Any

from .config import FrozenConfig, resolve_config
from .errors import sanitize_error_message
from .extraction.filetypes import language_id_for_path

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class TextDocument:
    """In-memory document; satisfies ``DocumentSource``."""

    text: str
    language_id: str
    file_name: str = "untitled"

    def get_text(self) -> str:
        return self.text


def load_document(
    file_path: str | Path,
    language_id: str | None = None,
    *,
    encoding: str = "utf-8",
) -> TextDocument:
    """Read a file into a ``TextDocument``.

    The language id is guessed from the file name unless given. Undecodable
    bytes are replaced rather than failing the read.

    Raises:
        OSError: If the file cannot be read.
    """
    path = Path(file_path)
    text = path.read_text(encoding=encoding, errors="replace")
    language_id = language_id or language_id_for_path(path)
    log.debug(
        "Loaded %s as %s (%d chars)",
        sanitize_error_message(str(path)),
        language_id,
        len(text),
    )
    return TextDocument(text=text, language_id=language_id, file_name=str(path))


class ResolvingConfigSource:
    """``ConfigSource`` that resolves a fresh snapshot on every call."""

    def __init__(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        project_root: Path | None = None,
    ) -> None:
        self._programmatic = programmatic
        self._profile = profile
        self._project_root = project_root

    def get_configuration(self) -> FrozenConfig:
        return resolve_config(
            self._programmatic, profile=self._profile, project_root=self._project_root
        ).to_frozen()
