"""Standard output snapshot presenter."""

import json
import sys
from typing import Optional, TextIO

from ..state.models import LiveStatus, RunSnapshot
from .base import BaseSnapshotConsumer

VALID_FORMATS = ("pretty", "json")


class StdoutPresenter(BaseSnapshotConsumer):
    """Prints one line per snapshot, skipping repeats of the same line."""

    def __init__(self, name: str = "stdout", format: str = "pretty",
                 stream: Optional[TextIO] = None):
        super().__init__(name, {"format": format})
        if format not in VALID_FORMATS:
            raise ValueError(f"Unsupported format: {format}")
        self.format = format
        self.stream = stream or sys.stdout
        self._last_line: Optional[str] = None

    def consume(self, snapshot: RunSnapshot, live_status: LiveStatus) -> None:
        line = self._format_snapshot(snapshot)
        if line == self._last_line:
            return
        self._last_line = line
        print(line, file=self.stream, flush=True)

    def _format_snapshot(self, snapshot: RunSnapshot) -> str:
        """Format snapshot for stdout output."""
        if self.format == "json":
            data = snapshot.to_dict()
            data.pop("taken_at", None)
            return json.dumps(data, sort_keys=True)

        if snapshot.is_routine_complete:
            return f"{snapshot.task_name} | {snapshot.drift_display}"

        timer = snapshot.overrun_display if snapshot.is_overrun else snapshot.remaining_display
        state = snapshot.timer_phase.value.upper()
        return (
            f"[{snapshot.task_position}] {snapshot.task_name} {timer} ({state})"
            f" | {snapshot.drift_display}"
        )

    def health_check(self) -> bool:
        """Check if the stream is writable."""
        try:
            return self.stream.writable()
        except (OSError, ValueError):
            return False
