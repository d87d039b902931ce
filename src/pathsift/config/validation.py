"""Schema validation with field-level error reporting."""

from typing import Any

from pydantic import ValidationError

from .schema import FIELD_NAMES, PathsiftSettings


class ConfigValidationError(ValueError):
    """Raised when a configuration value cannot be coerced to its field type."""

    def __init__(
        self, field: str, value: Any, message: str, suggestion: str | None = None
    ) -> None:
        self.field = field
        self.value = value
        self.message = message
        self.suggestion = suggestion

        error_msg = f"Configuration validation failed for '{field}': {message}"
        if suggestion:
            error_msg += f"\nSuggestion: {suggestion}"

        super().__init__(error_msg)


def validate_config_dict(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Validate a merged configuration and return normalized values.

    Floors are applied and unknown notification levels fall back to silent;
    unknown keys are dropped.

    Raises:
        ConfigValidationError: For the first field that fails coercion.
    """
    known = {k: v for k, v in config_dict.items() if k in FIELD_NAMES}
    try:
        settings = PathsiftSettings(**known)
    except ValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first["loc"] else "<root>"
        raise ConfigValidationError(
            field,
            known.get(field),
            first["msg"],
            suggestion=f"Check the type of '{field}' in your configuration",
        ) from e
    return settings.to_dict()
