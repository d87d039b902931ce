"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from various sources (environment, files, programmatic) into the correct
types with proper defaults and enforced floors.
"""

from typing import Any, Literal

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pathsift.constants import (
    CONFIG_FLOORS,
    DEFAULT_FILE_SIZE_WARN_BYTES,
    DEFAULT_LARGE_OUTPUT_LINES,
    DEFAULT_MANY_DOCUMENTS,
    DEFAULT_MAX_CACHE_SIZE,
    DEFAULT_MAX_CPU_USAGE,
    DEFAULT_MAX_DURATION_MS,
    DEFAULT_MAX_MEMORY_BYTES,
    DEFAULT_MIN_THROUGHPUT,
)

NotificationLevel = Literal["all", "important", "silent"]
NOTIFICATION_LEVELS: tuple[str, ...] = ("all", "important", "silent")


class PathsiftSettings(BaseSettings):
    """Pydantic settings schema for pathsift configuration.

    This handles validation, type coercion, and default values for all
    configuration fields. It integrates with environment variables using
    the PATHSIFT_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="PATHSIFT_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars for forward compatibility
    )

    # --- Safety ---

    safety_enabled: bool = Field(
        default=True, description="Run the pre-flight safety gate"
    )
    safety_file_size_warn_bytes: int = Field(
        default=DEFAULT_FILE_SIZE_WARN_BYTES,
        description="Documents larger than this (UTF-8 bytes) are blocked",
    )
    safety_large_output_lines_threshold: int = Field(
        default=DEFAULT_LARGE_OUTPUT_LINES,
        description="Line count above which a warning is raised",
    )
    safety_many_documents_threshold: int = Field(
        default=DEFAULT_MANY_DOCUMENTS,
        description="Batch size above which a warning is raised",
    )

    # --- Performance budgets ---

    performance_enabled: bool = True
    performance_max_duration: int = Field(
        default=DEFAULT_MAX_DURATION_MS, description="Milliseconds"
    )
    performance_max_memory_usage: int = Field(
        default=DEFAULT_MAX_MEMORY_BYTES, description="Bytes"
    )
    performance_max_cpu_usage: int = DEFAULT_MAX_CPU_USAGE
    performance_min_throughput: int = DEFAULT_MIN_THROUGHPUT
    performance_max_cache_size: int = DEFAULT_MAX_CACHE_SIZE

    # --- Reporting ---

    notifications_level: NotificationLevel = Field(
        default="silent",
        description="Which errors reach the notifier: all, important or silent",
    )
    show_parse_errors: bool = False
    dedupe_enabled: bool = False

    # --- Resolution and validation ---

    resolve_symlinks: bool = False
    resolve_workspace_relative: bool = False
    validation_enabled: bool = True
    validation_check_existence: bool = True
    validation_check_permissions: bool = False

    # --- Validation Rules ---

    @field_validator(*CONFIG_FLOORS, mode="after")
    @classmethod
    def apply_floor(cls, v: int, info: ValidationInfo) -> int:
        """Clamp numeric budgets to their minimum."""
        return max(v, CONFIG_FLOORS[info.field_name])

    @field_validator("notifications_level", mode="before")
    @classmethod
    def parse_notifications_level(cls, v: Any) -> str:
        """Unknown levels fall back to silent."""
        if isinstance(v, str) and v.strip().lower() in NOTIFICATION_LEVELS:
            return v.strip().lower()
        return "silent"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary suitable for SourceMap annotation."""
        return self.model_dump()


def default_values() -> dict[str, Any]:
    """Schema defaults, without consulting the environment."""
    return {
        name: field.get_default(call_default_factory=True)
        for name, field in PathsiftSettings.model_fields.items()
    }


FIELD_NAMES: tuple[str, ...] = tuple(PathsiftSettings.model_fields)
