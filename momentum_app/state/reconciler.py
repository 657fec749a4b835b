"""
Suspension reconciliation.

While the host is suspended no ticks fire. On suspend the live timer is
paused and the instant recorded; on resume the wall-clock gap is replayed
into the countdown and schedule drift as if the timer had kept running.
"""

from datetime import datetime

import structlog

from ..errors import InconsistentSuspendStateError
from ..logging.config import get_timer_logger
from ..utils.time import add_seconds, elapsed_seconds
from .drift import ScheduleDriftAccumulator
from .models import RunState, TimerPhase
from .timer import CountdownTimer

logger = structlog.get_logger(__name__)
timer_logger = get_timer_logger(__name__)


class SuspensionReconciler:
    """Pauses on suspend and replays the suspended gap on resume."""

    def __init__(self, timer: CountdownTimer, drift: ScheduleDriftAccumulator):
        self.timer = timer
        self.drift = drift
        self.logger = timer_logger

    def on_suspend(self, state: RunState, now: datetime) -> bool:
        """
        Record the suspension and pause a live timer.

        Returns:
            True if a live timer was suspended, False if nothing was running
        """
        if not state.is_live:
            self.logger.debug(
                "Suspended with timer not live, nothing to reconcile",
                phase=state.timer_phase.value
            )
            state.suspended_at = None
            return False

        state.suspended_at = now
        self.timer.pause(state, now)
        self.logger.info(
            "Timer suspended",
            task_id=state.current_task.id if state.current_task else None,
            is_overrun=state.is_overrun,
            paused_remaining=state.paused_remaining
        )
        return True

    def on_resume(self, state: RunState, now: datetime) -> bool:
        """
        Replay the suspended gap into the timer and drift, then restart.

        Returns:
            True if a suspension was reconciled, False if there was none

        Raises:
            InconsistentSuspendStateError: suspend data contradicts the timer
        """
        suspended_at = state.suspended_at
        if suspended_at is None:
            self.logger.debug("Resumed without a live suspension, no adjustment")
            return False

        state.suspended_at = None
        gap = elapsed_seconds(suspended_at, now)
        if gap < 0:
            self.logger.warning(
                "Wall clock moved backwards across suspension",
                suspended_at=suspended_at.isoformat(),
                resumed_at=now.isoformat(),
                gap=gap
            )
            gap = 0.0

        if state.timer_phase != TimerPhase.PAUSED:
            raise InconsistentSuspendStateError(
                "Timer not paused on resume from suspension",
                context={"phase": state.timer_phase.value, "gap": gap},
            )

        task = state.require_task("resume")
        paused_remaining = state.paused_remaining

        if state.is_overrun:
            if paused_remaining is None or paused_remaining > 0:
                raise InconsistentSuspendStateError(
                    "Overrun flag set but paused remaining time is not zero",
                    context={"paused_remaining": paused_remaining, "gap": gap},
                )
            self.drift.apply(state, gap, reason="suspension_overrun")
            self.logger.info(
                "Resumed from suspension during overrun",
                task_id=task.id,
                gap=round(gap, 3),
                schedule_drift=round(state.schedule_drift, 3)
            )
            self.timer.start(state, now)
            return True

        if paused_remaining is None:
            raise InconsistentSuspendStateError(
                "Suspended timer has neither paused time nor overrun flag",
                context={"gap": gap},
            )

        new_remaining = paused_remaining - gap
        if new_remaining > 0:
            state.paused_remaining = new_remaining
            self.logger.info(
                "Resumed from suspension",
                task_id=task.id,
                gap=round(gap, 3),
                remaining=round(new_remaining, 3)
            )
            self.timer.start(state, now)
            return True

        # Countdown ran out while suspended: charge the time past zero now.
        overrun_during_suspension = -new_remaining
        self.drift.apply(state, overrun_during_suspension, reason="suspension_overrun")
        state.is_overrun = True
        state.paused_remaining = 0.0
        state.overrun_began_at = add_seconds(suspended_at, paused_remaining)
        self.logger.info(
            "Countdown finished during suspension",
            task_id=task.id,
            gap=round(gap, 3),
            overrun_seconds=round(overrun_during_suspension, 3),
            overrun_began_at=state.overrun_began_at.isoformat(),
            schedule_drift=round(state.schedule_drift, 3)
        )
        # start() anchors the overrun baseline at now; everything before it
        # has been charged above.
        self.timer.start(state, now)
        return True
