"""Configuration source tracking.

This module provides the SourceMap system for tracking where each configuration
value originated.
"""

from typing import Any

from .types import ConfigOrigin, SourceMap


class SourceTracker:
    """Tracks the origin of configuration values during resolution."""

    def __init__(self) -> None:
        self._origins: dict[str, ConfigOrigin] = {}

    def set_origin(self, field: str, origin: ConfigOrigin) -> None:
        self._origins[field] = origin

    def set_multiple(self, fields: dict[str, Any], origin: ConfigOrigin) -> None:
        """Record the same origin for every field in ``fields``."""
        for field in fields:
            self._origins[field] = origin

    def get_source_map(self) -> SourceMap:
        """Get a copy of the current source map."""
        return dict(self._origins)

    def has_origin(self, field: str) -> bool:
        return field in self._origins


def summarize_origins(source_map: SourceMap) -> dict[str, int]:
    """Count fields per origin (e.g. ``{"default": 15, "env": 3}``)."""
    counts: dict[str, int] = {}
    for origin in source_map.values():
        counts[origin] = counts.get(origin, 0) + 1
    return counts
