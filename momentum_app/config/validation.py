"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_STDOUT_FORMATS = ["pretty", "json"]


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_runner_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate runner parameters."""
        errors = []

        if "tick_interval_seconds" in params:
            value = params["tick_interval_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="tick_interval_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "auto_start_next" in params:
            value = params["auto_start_next"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="auto_start_next",
                    message="Must be a boolean",
                    value=value
                ))

        # A tolerance of a full second would hide real drift
        if "drift_tolerance_seconds" in params:
            value = params["drift_tolerance_seconds"]
            if not _is_number(value) or value < 0 or value >= 1:
                errors.append(ValidationError(
                    field="drift_tolerance_seconds",
                    message="Must be a number in [0, 1)",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {VALID_LOG_LEVELS}",
                    value=value
                ))

        for flag in ("format_json", "include_timestamp"):
            if flag in params and not isinstance(params[flag], bool):
                errors.append(ValidationError(
                    field=flag,
                    message="Must be a boolean",
                    value=params[flag]
                ))

        return errors

    @staticmethod
    def validate_presentation_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate presentation parameters."""
        errors = []

        if "stdout_format" in params:
            value = params["stdout_format"]
            if value not in VALID_STDOUT_FORMATS:
                errors.append(ValidationError(
                    field="stdout_format",
                    message=f"Must be one of {VALID_STDOUT_FORMATS}",
                    value=value
                ))

        if "stdout_enabled" in params and not isinstance(params["stdout_enabled"], bool):
            errors.append(ValidationError(
                field="stdout_enabled",
                message="Must be a boolean",
                value=params["stdout_enabled"]
            ))

        if params.get("live_status_path") is not None:
            value = params["live_status_path"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="live_status_path",
                    message="Must be a non-empty path string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "runner" in config:
            errors.extend(ConfigValidator.validate_runner_params(config["runner"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        if "presentation" in config:
            errors.extend(ConfigValidator.validate_presentation_params(config["presentation"]))

        return errors
