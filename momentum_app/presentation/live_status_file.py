"""File-based live status writer for companion renderers."""

import json
import os
from pathlib import Path
from typing import Optional

from ..state.models import LiveStatus, RunSnapshot
from .base import BaseSnapshotConsumer, SnapshotConsumerError


class LiveStatusFileWriter(BaseSnapshotConsumer):
    """Keeps a JSON file holding the latest LiveStatus.

    The file is replaced atomically so a reader never sees a partial write.
    """

    def __init__(self, output_path: str, name: str = "live_status", create_dirs: bool = True):
        super().__init__(name, {"output_path": output_path})
        self.output_path = Path(output_path)
        if create_dirs:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._last_payload: Optional[dict] = None

    def consume(self, snapshot: RunSnapshot, live_status: LiveStatus) -> None:
        payload = live_status.to_dict()
        # remaining_seconds changes every tick; the end instant does not
        comparable = {k: v for k, v in payload.items() if k != "remaining_seconds"}
        if comparable == self._last_payload:
            return

        tmp_path = self.output_path.with_suffix(self.output_path.suffix + ".tmp")
        try:
            with open(tmp_path, "w") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self.output_path)
        except OSError as e:
            self.logger.warning(
                "Live status write failed",
                output_path=str(self.output_path),
                error=str(e)
            )
            raise SnapshotConsumerError(f"Failed to write {self.output_path}: {e}") from e

        self._last_payload = comparable
        self.logger.debug(
            "Live status written",
            output_path=str(self.output_path),
            task_name=live_status.task_name,
            is_overrun=live_status.is_overrun
        )

    def read(self) -> Optional[dict]:
        """Read back the last written status, None when nothing is written."""
        if not self.output_path.exists():
            return None
        with open(self.output_path) as f:
            return json.load(f)

    def health_check(self) -> bool:
        """Check that the output directory is writable."""
        directory = self.output_path.parent
        return directory.exists() and os.access(directory, os.W_OK)
