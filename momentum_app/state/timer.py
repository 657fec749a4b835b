"""
Countdown timer for the current task.

The timer never keeps its own clock: every operation is handed the current
wall-clock instant and recomputes elapsed time from ``running_since``.
Overrun time is charged to schedule drift in whole seconds, one fold per
tick, with the baseline advanced by exactly the seconds charged.
"""

import math
from datetime import datetime
from typing import Optional

import structlog

from ..errors import AlreadyRunningError, NotRunningError
from ..logging.config import get_timer_logger, log_phase_transition
from ..utils.time import add_seconds, elapsed_seconds
from .drift import ScheduleDriftAccumulator
from .models import RunState, Task, TaskCompletion, TimerPhase

logger = structlog.get_logger(__name__)
timer_logger = get_timer_logger(__name__)


class CountdownTimer:
    """Drives the countdown phases of the current task within a RunState."""

    def __init__(self, drift: ScheduleDriftAccumulator):
        self.drift = drift
        self.logger = timer_logger

    def configure(self, state: RunState, task: Task) -> None:
        """Load a task into the timer: full duration, not started."""
        state.clear_timer()
        state.countdown_basis = task.planned_duration
        self.logger.debug(
            "Timer configured",
            task_id=task.id,
            task_name=task.name,
            planned_duration=task.planned_duration
        )

    def start(self, state: RunState, now: datetime) -> None:
        """
        Start or resume the countdown.

        Resumes from ``paused_remaining`` when set, otherwise counts down the
        full planned duration. A resume with nothing left goes straight into
        overrun with the baseline anchored at ``now``.

        Raises:
            AlreadyRunningError: countdown is already live
            NoActiveTaskError, RoutineCompleteError: no task to time
        """
        task = state.require_task("start")
        if state.is_live:
            raise AlreadyRunningError(
                "Timer is already running",
                operation="start",
                phase=state.timer_phase.value,
                context={"task_id": task.id},
            )

        from_phase = state.timer_phase
        resuming_into_overrun = state.paused_remaining is not None and state.paused_remaining <= 0

        state.countdown_basis = (
            state.paused_remaining if state.paused_remaining is not None else task.planned_duration
        )
        state.running_since = now
        state.paused_remaining = None

        if resuming_into_overrun:
            state.timer_phase = TimerPhase.OVERRUN
            state.is_overrun = True
            state.overrun_baseline = now
            if state.overrun_began_at is None:
                # paused at zero before any tick saw it
                state.overrun_began_at = now
        else:
            state.timer_phase = TimerPhase.RUNNING
            state.is_overrun = False
            state.overrun_baseline = None

        log_phase_transition(
            self.logger,
            task_id=task.id,
            from_phase=from_phase.value,
            to_phase=state.timer_phase.value,
            trigger="start",
            context={"countdown_basis": state.countdown_basis}
        )

    def tick(self, state: RunState, now: datetime) -> bool:
        """
        Process one periodic tick.

        Returns:
            True if the tick was applied, False if the timer is not live
        """
        if not state.is_live or state.running_since is None:
            self.logger.debug("Tick ignored, timer not live", phase=state.timer_phase.value)
            return False

        task = state.current_task
        remaining = state.countdown_basis - elapsed_seconds(state.running_since, now)

        if remaining > 0:
            if state.timer_phase == TimerPhase.OVERRUN:
                # Overrun never legitimately reverts; a positive remaining here
                # means the basis was computed wrong. Keep overrun.
                self.logger.warning(
                    "Positive remaining time observed during overrun",
                    task_id=task.id if task else None,
                    remaining=remaining,
                    countdown_basis=state.countdown_basis
                )
            return True

        if state.timer_phase == TimerPhase.RUNNING:
            state.timer_phase = TimerPhase.OVERRUN
            state.is_overrun = True
            state.overrun_baseline = now
            state.overrun_began_at = add_seconds(state.running_since, state.countdown_basis)
            # The transition tick itself is not charged.
            log_phase_transition(
                self.logger,
                task_id=task.id if task else "",
                from_phase=TimerPhase.RUNNING.value,
                to_phase=TimerPhase.OVERRUN.value,
                trigger="tick",
                context={"overrun_began_at": state.overrun_began_at.isoformat()}
            )
            return True

        self._fold_overrun(state, now, reason="overrun_tick")
        return True

    def pause(self, state: RunState, now: datetime) -> None:
        """
        Pause a live countdown.

        In overrun, any whole seconds since the baseline are charged first
        and the remaining time is pinned at zero.

        Raises:
            NotRunningError: timer is idle or already paused
        """
        task = state.require_task("pause")
        if not state.is_live or state.running_since is None:
            raise NotRunningError(
                "Timer is not running",
                operation="pause",
                phase=state.timer_phase.value,
                context={"task_id": task.id},
            )

        from_phase = state.timer_phase
        if state.timer_phase == TimerPhase.OVERRUN:
            self._fold_overrun(state, now, reason="overrun_pause_catch_up")
            state.paused_remaining = 0.0
        else:
            remaining = state.countdown_basis - elapsed_seconds(state.running_since, now)
            state.paused_remaining = max(0.0, remaining)

        state.running_since = None
        state.overrun_baseline = None
        state.timer_phase = TimerPhase.PAUSED

        log_phase_transition(
            self.logger,
            task_id=task.id,
            from_phase=from_phase.value,
            to_phase=TimerPhase.PAUSED.value,
            trigger="pause",
            context={"paused_remaining": state.paused_remaining, "is_overrun": state.is_overrun}
        )

    def reset_current(self, state: RunState) -> None:
        """Restart the current task from its full duration. Drift is kept."""
        task = state.require_task("reset")
        from_phase = state.timer_phase
        task_drift = state.task_drift

        self.configure(state, task)
        # overrun already charged on this task still counts toward its completion record
        state.task_drift = task_drift

        log_phase_transition(
            self.logger,
            task_id=task.id,
            from_phase=from_phase.value,
            to_phase=TimerPhase.IDLE.value,
            trigger="reset",
            context={"schedule_drift": state.schedule_drift}
        )

    def remaining(self, state: RunState, now: datetime) -> float:
        """Seconds left on the countdown, clamped at zero."""
        if state.current_task is None:
            return 0.0
        if state.timer_phase == TimerPhase.OVERRUN:
            return 0.0
        if state.is_live and state.running_since is not None:
            return max(0.0, state.countdown_basis - elapsed_seconds(state.running_since, now))
        if state.paused_remaining is not None:
            return max(0.0, state.paused_remaining)
        return state.current_task.planned_duration

    def unused_seconds(self, state: RunState, now: datetime) -> float:
        """Planned time the current task has not consumed."""
        task = state.require_task("measure")
        if state.timer_phase == TimerPhase.OVERRUN:
            return 0.0
        if state.timer_phase == TimerPhase.RUNNING and state.running_since is not None:
            return max(0.0, state.countdown_basis - elapsed_seconds(state.running_since, now))
        if state.timer_phase == TimerPhase.PAUSED and state.paused_remaining is not None:
            return state.paused_remaining
        return task.planned_duration

    def mark_done(self, state: RunState, now: datetime, skipped: bool = False) -> TaskCompletion:
        """
        Finish the current task and bank its unused time as ahead.

        Finishing on time or late banks nothing beyond what overrun ticks
        already charged. Leaves the timer cleared; advancing is up to the
        caller.

        Returns:
            Completion record for the finished task
        """
        task = state.require_task("skip" if skipped else "complete")
        from_phase = state.timer_phase

        unused = self.unused_seconds(state, now)
        if unused:
            self.drift.apply(state, -unused, reason="skip" if skipped else "completion")

        # task_drift now holds overrun charges minus the banked unused time.
        actual = max(0.0, task.planned_duration + state.task_drift)
        completion = TaskCompletion(
            task_id=task.id,
            name=task.name,
            planned_seconds=task.planned_duration,
            actual_seconds=actual,
            unused_seconds=unused,
            skipped=skipped,
            completed_at=now,
        )
        state.completions.append(completion)
        state.clear_timer()

        self.logger.info(
            "Task skipped" if skipped else "Task completed",
            task_id=task.id,
            task_name=task.name,
            from_phase=from_phase.value,
            unused_seconds=round(unused, 3),
            actual_seconds=round(actual, 3),
            deviation_seconds=round(completion.deviation_seconds, 3),
            schedule_drift=round(state.schedule_drift, 3)
        )
        return completion

    def _fold_overrun(self, state: RunState, now: datetime, reason: str) -> int:
        """Charge whole overrun seconds since the baseline; return seconds charged."""
        baseline: Optional[datetime] = state.overrun_baseline
        if baseline is None:
            task = state.current_task
            self.logger.error(
                "Overrun without baseline, re-anchoring without charge",
                task_id=task.id if task else None,
                reason=reason
            )
            state.overrun_baseline = now
            return 0

        whole = math.floor(elapsed_seconds(baseline, now))
        if whole < 1:
            return 0

        self.drift.apply(state, float(whole), reason=reason)
        state.overrun_baseline = add_seconds(baseline, whole)
        return whole
