"""Base classes for snapshot consumers."""

from abc import ABC, abstractmethod
from typing import Any

import structlog

from ..state.models import LiveStatus, RunSnapshot


class SnapshotConsumerError(Exception):
    """Base exception for snapshot consumer errors."""
    pass


class BaseSnapshotConsumer(ABC):
    """Base class for anything that renders or forwards run snapshots."""

    def __init__(self, name: str, config: Any = None):
        self.name = name
        self.config = config
        self.logger = structlog.get_logger(f"presentation.{name}")
        self._consume_count = 0
        self._error_count = 0

    @abstractmethod
    def consume(self, snapshot: RunSnapshot, live_status: LiveStatus) -> None:
        """
        Receive the state published after a runner operation.

        Args:
            snapshot: Presentation projection of the run
            live_status: Companion live-status projection
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the consumer can currently accept snapshots."""
        pass

    def __call__(self, snapshot: RunSnapshot, live_status: LiveStatus) -> None:
        try:
            self.consume(snapshot, live_status)
            self._consume_count += 1
        except Exception:
            self._error_count += 1
            raise

    def get_stats(self) -> dict[str, Any]:
        """Get consumer statistics."""
        return {
            "name": self.name,
            "consume_count": self._consume_count,
            "error_count": self._error_count,
            "healthy": self.health_check(),
        }
