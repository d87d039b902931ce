"""Core configuration data types for the pathsift pipeline.

This module defines the fundamental data structures used throughout the configuration
system, following the resolve-once, freeze-then-flow pattern.
"""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Literal, NamedTuple

from .schema import NotificationLevel

# --- Source Tracking Types ---

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

# --- Grouped views ---


class ResolutionSettings(NamedTuple):
    resolve_symlinks: bool
    resolve_workspace_relative: bool

    @property
    def enabled(self) -> bool:
        return self.resolve_symlinks or self.resolve_workspace_relative


class ValidationSettings(NamedTuple):
    enabled: bool
    check_existence: bool
    check_permissions: bool


class SafetySettings(NamedTuple):
    enabled: bool
    file_size_warn_bytes: int
    large_output_lines_threshold: int
    many_documents_threshold: int


# --- Core Configuration Data ---


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration attached to every pipeline run.

    This is the final form of configuration that flows through extraction,
    the safety gate, validation and resolution. It contains only field values
    without audit metadata. Any attempt to modify it raises.
    """

    safety_enabled: bool
    safety_file_size_warn_bytes: int
    safety_large_output_lines_threshold: int
    safety_many_documents_threshold: int
    performance_enabled: bool
    performance_max_duration: int
    performance_max_memory_usage: int
    performance_max_cpu_usage: int
    performance_min_throughput: int
    performance_max_cache_size: int
    notifications_level: NotificationLevel
    show_parse_errors: bool
    dedupe_enabled: bool
    resolve_symlinks: bool
    resolve_workspace_relative: bool
    validation_enabled: bool
    validation_check_existence: bool
    validation_check_permissions: bool

    @property
    def resolution(self) -> ResolutionSettings:
        return ResolutionSettings(self.resolve_symlinks, self.resolve_workspace_relative)

    @property
    def validation(self) -> ValidationSettings:
        return ValidationSettings(
            self.validation_enabled,
            self.validation_check_existence,
            self.validation_check_permissions,
        )

    @property
    def safety(self) -> SafetySettings:
        return SafetySettings(
            self.safety_enabled,
            self.safety_file_size_warn_bytes,
            self.safety_large_output_lines_threshold,
            self.safety_many_documents_threshold,
        )


FROZEN_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(FrozenConfig))


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing.

    This represents the validated, merged result of combining programmatic
    overrides, environment variables, files, and defaults. It includes audit
    metadata for observability.
    """

    safety_enabled: bool
    safety_file_size_warn_bytes: int
    safety_large_output_lines_threshold: int
    safety_many_documents_threshold: int
    performance_enabled: bool
    performance_max_duration: int
    performance_max_memory_usage: int
    performance_max_cpu_usage: int
    performance_min_throughput: int
    performance_max_cache_size: int
    notifications_level: NotificationLevel
    show_parse_errors: bool
    dedupe_enabled: bool
    resolve_symlinks: bool
    resolve_workspace_relative: bool
    validation_enabled: bool
    validation_check_existence: bool
    validation_check_permissions: bool

    # Audit metadata - tracks where each field value came from
    origin: SourceMap

    def to_frozen(self) -> FrozenConfig:
        """Convert to the immutable configuration used in the pipeline."""
        return FrozenConfig(**{name: getattr(self, name) for name in FROZEN_FIELDS})

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Create a new ResolvedConfig with programmatic overrides applied.

        Overrides bypass schema validation; use ``resolve_config`` when floors
        and coercion matter.

        Args:
            **overrides: Field values to override. Unknown fields are ignored.

        Returns:
            New ResolvedConfig with overrides applied and origin updated.
        """
        new_values = self._asdict()
        new_origin = dict(self.origin)

        for field, value in overrides.items():
            if field in FROZEN_FIELDS:
                new_values[field] = value
                new_origin[field] = "programmatic"

        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """Report the origin of each field, one ``field: origin:value`` per line."""
        lines = []
        for field in FROZEN_FIELDS:
            if field not in self.origin:
                continue
            origin = self.origin[field]
            value = getattr(self, field)
            if origin == "env":
                value_display = f"env:PATHSIFT_{field.upper()}={value}"
            else:
                value_display = f"{origin}:{value}"
            lines.append(f"{field}: {value_display}")
        return "\n".join(lines)
