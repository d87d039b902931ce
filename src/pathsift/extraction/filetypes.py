"""
Map document language identifiers onto extractor file types
"""

from enum import Enum
from pathlib import Path


class FileType(Enum):
    """Document formats with a path extractor"""

    CSV = "csv"
    TOML = "toml"
    DOTENV = "dotenv"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    JSON = "json"
    HTML = "html"
    CSS = "css"
    UNKNOWN = "unknown"


# Host language ids, including dialect aliases
LANGUAGE_ID_TO_FILE_TYPE = {
    "csv": FileType.CSV,
    "toml": FileType.TOML,
    "dotenv": FileType.DOTENV,
    "env": FileType.DOTENV,
    "javascript": FileType.JAVASCRIPT,
    "javascriptreact": FileType.JAVASCRIPT,
    "typescript": FileType.TYPESCRIPT,
    "typescriptreact": FileType.TYPESCRIPT,
    "json": FileType.JSON,
    "jsonc": FileType.JSON,
    "html": FileType.HTML,
    "css": FileType.CSS,
    "scss": FileType.CSS,
    "less": FileType.CSS,
}

SUPPORTED_FORMATS = tuple(
    file_type.value for file_type in FileType if file_type is not FileType.UNKNOWN
)

EXTENSION_TO_LANGUAGE_ID = {
    ".csv": "csv",
    ".toml": "toml",
    ".env": "dotenv",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascriptreact",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "typescriptreact",
    ".json": "json",
    ".jsonc": "jsonc",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".less": "less",
}


def determine_file_type(language_id: str) -> FileType:
    """Resolve a language id; anything unrecognized is ``UNKNOWN``"""
    return LANGUAGE_ID_TO_FILE_TYPE.get(language_id, FileType.UNKNOWN)


def language_id_for_path(file_path: str | Path) -> str:
    """Guess a language id from a file name (``.env.local`` counts as dotenv)"""
    path = Path(file_path)
    name = path.name.lower()
    if name == ".env" or name.startswith(".env."):
        return "dotenv"
    return EXTENSION_TO_LANGUAGE_ID.get(path.suffix.lower(), "plaintext")
