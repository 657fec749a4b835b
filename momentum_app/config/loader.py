"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml

from .defaults import (
    DefaultConfig,
    LoggingParams,
    PresentationParams,
    RunnerParams,
    get_default_config,
)

logger = structlog.get_logger(__name__)

CONFIG_FILE_NAME = "runner.yaml"

_SECTIONS = {
    "runner": RunnerParams,
    "logging": LoggingParams,
    "presentation": PresentationParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from runner.yaml, empty when the file is absent."""
        config_file = self.config_dir / CONFIG_FILE_NAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        return file_config or {}

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. runner.yaml in the config directory
        3. Dataclass defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """Merge all tiers and build the typed configuration."""
        return self.build(self.merge_config(overrides))

    def build(self, merged: dict[str, Any]) -> DefaultConfig:
        """Turn a merged config dict back into frozen dataclasses."""
        sections = {}
        for section_name, section_cls in _SECTIONS.items():
            values = merged.get(section_name) or {}
            known = {f.name for f in fields(section_cls)}
            unknown = sorted(set(values) - known)
            if unknown:
                logger.warning(
                    "Ignoring unknown configuration keys",
                    section=section_name,
                    keys=unknown
                )
            sections[section_name] = section_cls(
                **{k: v for k, v in values.items() if k in known}
            )
        return DefaultConfig(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
