"""Basic exceptions for path extraction and validation"""


class PathsiftError(Exception):
    """Base exception for pathsift errors"""


class UnsupportedFormatError(PathsiftError):
    """Raised when a document format has no extractor"""

    def __init__(self, language_id: str):
        self.language_id = language_id
        super().__init__(f"Unsupported document format: {language_id}")


class SafetyThresholdError(PathsiftError):
    """Raised when a document exceeds a hard safety threshold"""


class PathValidationError(PathsiftError):
    """Raised when a path fails validation and the caller asked for strictness"""


class ResolutionError(PathsiftError):
    """Raised when canonical resolution fails and no fallback is allowed"""
