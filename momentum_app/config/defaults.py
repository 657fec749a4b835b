"""Default configuration parameters for the routine runner."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RunnerParams:
    """Timing and sequencing parameters."""
    tick_interval_seconds: float = 1.0       # Tick driver cadence
    auto_start_next: bool = True             # Start the next task's timer on advance
    drift_tolerance_seconds: float = 0.1     # |drift| below this reads "On schedule"


@dataclass(frozen=True)
class LoggingParams:
    """structlog output parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_timestamp: bool = True


@dataclass(frozen=True)
class PresentationParams:
    """Snapshot consumer parameters."""
    stdout_enabled: bool = True
    stdout_format: str = "pretty"            # pretty, json
    live_status_path: Optional[str] = None   # Write LiveStatus JSON here when set


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    runner: RunnerParams
    logging: LoggingParams
    presentation: PresentationParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        runner=RunnerParams(),
        logging=LoggingParams(),
        presentation=PresentationParams(),
    )
