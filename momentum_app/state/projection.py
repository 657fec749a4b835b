"""
Read-only projections of a run for presentation and live-status surfaces.
"""

from datetime import datetime
from typing import Optional

from ..utils.formatting import PLACEHOLDER, format_duration, format_overrun
from ..utils.time import add_seconds
from .drift import ScheduleDriftAccumulator
from .models import LiveStatus, RunSnapshot, RunState, TimerPhase
from .timer import CountdownTimer

ROUTINE_COMPLETE_NAME = "Routine Complete!"
NO_TASKS_NAME = "No Tasks Available"


def empty_snapshot(drift: ScheduleDriftAccumulator, now: datetime) -> RunSnapshot:
    """Snapshot for a runner that has no tasks to run."""
    return RunSnapshot(
        task_name=NO_TASKS_NAME,
        remaining_display=PLACEHOLDER,
        is_overrun=False,
        schedule_drift=0.0,
        drift_display=drift.format(0.0),
        is_routine_complete=True,
        is_running=False,
        timer_phase=TimerPhase.IDLE,
        taken_at=now,
        task_position="No Tasks",
    )


def task_position(state: RunState) -> str:
    if state.is_complete:
        return "Tasks Complete"
    if not state.tasks:
        return "No Tasks"
    index = max(state.task_index, 0)
    return f"Task {index + 1} / {len(state.tasks)}"


def progress_fraction(state: RunState) -> float:
    """Share of planned routine time belonging to tasks already finished."""
    total = sum(t.planned_duration for t in state.tasks)
    if total <= 0:
        return 0.0
    done = sum(c.planned_seconds for c in state.completions)
    return min(max(done / total, 0.0), 1.0)


def estimated_finish(state: RunState, remaining: float, now: datetime) -> Optional[datetime]:
    """Now plus what is left of the current task and every later task."""
    if state.is_complete or state.current_task is None:
        return None
    later = sum(t.planned_duration for t in state.tasks[state.task_index + 1:])
    return add_seconds(now, max(0.0, remaining) + later)


def project_snapshot(state: RunState, timer: CountdownTimer,
                     drift: ScheduleDriftAccumulator, now: datetime) -> RunSnapshot:
    """Build the presentation snapshot for a run at ``now``."""
    drift_display = drift.format(state.schedule_drift)

    if state.is_complete:
        return RunSnapshot(
            task_name=ROUTINE_COMPLETE_NAME,
            remaining_display=PLACEHOLDER,
            is_overrun=False,
            schedule_drift=state.schedule_drift,
            drift_display=drift_display,
            is_routine_complete=True,
            is_running=False,
            timer_phase=TimerPhase.IDLE,
            taken_at=now,
            task_position=task_position(state),
            progress_fraction=1.0 if state.tasks else 0.0,
            task_progress_fraction=0.0,
        )

    task = state.current_task
    remaining = timer.remaining(state, now)
    task_progress = 0.0
    if task is not None and task.planned_duration > 0:
        task_progress = min(max(1.0 - remaining / task.planned_duration, 0.0), 1.0)
    elif task is not None and state.is_overrun:
        task_progress = 1.0

    next_task = state.next_task
    return RunSnapshot(
        task_name=task.name if task else "",
        remaining_display=format_duration(remaining),
        is_overrun=state.is_overrun,
        schedule_drift=state.schedule_drift,
        drift_display=drift_display,
        is_routine_complete=False,
        is_running=state.is_live,
        timer_phase=state.timer_phase,
        taken_at=now,
        task_position=task_position(state),
        next_task_name=next_task.name if next_task else None,
        progress_fraction=progress_fraction(state),
        task_progress_fraction=task_progress,
        overrun_display=format_overrun(max(state.task_drift, 0.0)) if state.is_overrun else None,
        estimated_finish=estimated_finish(state, remaining, now),
    )


def project_live_status(state: RunState, timer: CountdownTimer,
                        drift: ScheduleDriftAccumulator, now: datetime) -> LiveStatus:
    """
    Build the companion live-status view.

    While the countdown is live the end instant is fixed; while paused or
    idle it is ``now + remaining`` so a renderer shows a frozen countdown.
    In overrun it is the instant the countdown reached zero.
    """
    drift_display = drift.format(state.schedule_drift)

    if state.is_complete or state.current_task is None:
        return LiveStatus(
            task_name=ROUTINE_COMPLETE_NAME if state.is_complete else NO_TASKS_NAME,
            task_end_time=None,
            remaining_seconds=0.0,
            is_overrun=False,
            drift_display=drift_display,
        )

    remaining = timer.remaining(state, now)
    if state.is_overrun:
        end_time = state.overrun_began_at or now
    elif state.is_live and state.running_since is not None:
        end_time = add_seconds(state.running_since, state.countdown_basis)
    else:
        end_time = add_seconds(now, remaining)

    return LiveStatus(
        task_name=state.current_task.name,
        task_end_time=end_time,
        remaining_seconds=remaining,
        is_overrun=state.is_overrun,
        drift_display=drift_display,
    )
