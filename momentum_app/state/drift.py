"""
Schedule drift bookkeeping.

Drift is a signed running total of seconds: negative means the routine is
ahead of plan, positive means behind. It only moves through ``apply``.
"""

import structlog

from ..logging.config import get_timer_logger, log_drift_change
from ..utils.formatting import format_duration
from .models import RunState

logger = structlog.get_logger(__name__)
timer_logger = get_timer_logger(__name__)

DEFAULT_TOLERANCE_SECONDS = 0.1


class ScheduleDriftAccumulator:
    """Applies signed drift changes to a run and renders the total."""

    def __init__(self, tolerance_seconds: float = DEFAULT_TOLERANCE_SECONDS):
        self.tolerance_seconds = tolerance_seconds
        self.logger = timer_logger

    def apply(self, state: RunState, delta: float, reason: str) -> float:
        """
        Add a signed amount to the run's drift.

        Args:
            state: Run being updated
            delta: Seconds to add (negative banks time ahead)
            reason: Cause of the change, for the audit log

        Returns:
            New drift total
        """
        state.schedule_drift += delta
        state.task_drift += delta

        task = state.current_task
        log_drift_change(
            self.logger,
            task_id=task.id if task else None,
            delta=delta,
            total=state.schedule_drift,
            reason=reason,
        )
        return state.schedule_drift

    def format(self, drift: float) -> str:
        """
        Render a drift total for display.

        Values within the tolerance band read as on schedule; this absorbs
        floating point noise from many small applications.
        """
        if abs(drift) < self.tolerance_seconds:
            return "On schedule"
        if drift < 0:
            return f"{format_duration(drift)} ahead of schedule"
        return f"{format_duration(drift)} behind schedule"
