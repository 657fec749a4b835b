"""
State data models for routine runs.

This module defines the immutable task definition, the single mutable
``RunState`` owned by a run, and the immutable projections handed to the
presentation layer after every operation.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..errors import NoActiveTaskError, RoutineCompleteError
from ..utils.time import format_iso

# task_index sentinels
NOT_STARTED = -1
ROUTINE_COMPLETE = -2


class TimerPhase(str, Enum):
    """Countdown timer phases."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    OVERRUN = "overrun"


LIVE_PHASES = (TimerPhase.RUNNING, TimerPhase.OVERRUN)


@dataclass(frozen=True)
class Task:
    """A single timed step of a routine."""
    id: str
    name: str
    planned_duration: float          # seconds, non-negative


@dataclass(frozen=True)
class TaskCompletion:
    """Record of a task leaving the run, by completion or skip."""
    task_id: str
    name: str
    planned_seconds: float
    actual_seconds: float
    unused_seconds: float
    skipped: bool
    completed_at: datetime

    @property
    def deviation_seconds(self) -> float:
        """Actual minus planned; positive means the task ran long."""
        return self.actual_seconds - self.planned_seconds


@dataclass
class RunState:
    """Mutable state of one routine run.

    Exactly one of ``running_since`` and ``paused_remaining`` carries live
    information while a task is in progress. ``overrun_baseline`` is set
    only while the phase is OVERRUN; ``is_overrun`` survives a pause so a
    resume knows to go straight back into overrun.
    """

    tasks: tuple[Task, ...]
    task_index: int = NOT_STARTED
    timer_phase: TimerPhase = TimerPhase.IDLE

    # Countdown bookkeeping for the current task
    countdown_basis: float = 0.0
    running_since: Optional[datetime] = None
    paused_remaining: Optional[float] = None
    overrun_baseline: Optional[datetime] = None
    overrun_began_at: Optional[datetime] = None     # instant the countdown hit zero
    is_overrun: bool = False
    task_drift: float = 0.0                         # drift charged while on this task

    # Run-wide bookkeeping
    schedule_drift: float = 0.0
    suspended_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    completions: list[TaskCompletion] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.task_index == ROUTINE_COMPLETE

    @property
    def is_live(self) -> bool:
        """True while the countdown is ticking (running or overrun)."""
        return self.timer_phase in LIVE_PHASES

    @property
    def current_task(self) -> Optional[Task]:
        if 0 <= self.task_index < len(self.tasks):
            return self.tasks[self.task_index]
        return None

    @property
    def next_task(self) -> Optional[Task]:
        if 0 <= self.task_index < len(self.tasks) - 1:
            return self.tasks[self.task_index + 1]
        return None

    def require_task(self, operation: str) -> Task:
        """Return the current task or raise the matching sequencing error."""
        if self.is_complete:
            raise RoutineCompleteError(
                f"Cannot {operation}: routine is complete",
                operation=operation,
                phase=self.timer_phase.value,
            )
        task = self.current_task
        if task is None:
            raise NoActiveTaskError(
                f"Cannot {operation}: no active task",
                operation=operation,
                phase=self.timer_phase.value,
                context={"task_index": self.task_index},
            )
        return task

    def clear_timer(self) -> None:
        """Drop all timer-local state. Schedule drift is left alone."""
        self.timer_phase = TimerPhase.IDLE
        self.countdown_basis = 0.0
        self.running_since = None
        self.paused_remaining = None
        self.overrun_baseline = None
        self.overrun_began_at = None
        self.is_overrun = False
        self.task_drift = 0.0
        self.suspended_at = None


@dataclass(frozen=True)
class RunSnapshot:
    """Read-only projection of a run for the presentation layer."""

    task_name: str
    remaining_display: str
    is_overrun: bool
    schedule_drift: float
    drift_display: str
    is_routine_complete: bool
    is_running: bool
    timer_phase: TimerPhase
    taken_at: datetime

    # Progress
    task_position: str = ""
    next_task_name: Optional[str] = None
    progress_fraction: float = 0.0
    task_progress_fraction: float = 0.0
    overrun_display: Optional[str] = None
    estimated_finish: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["timer_phase"] = self.timer_phase.value
        data["taken_at"] = format_iso(self.taken_at)
        data["estimated_finish"] = format_iso(self.estimated_finish)
        return data


@dataclass(frozen=True)
class LiveStatus:
    """Compact status for a companion live-status surface.

    ``task_end_time`` is an absolute instant so an external renderer can
    count down on its own cadence.
    """

    task_name: str
    task_end_time: Optional[datetime]
    remaining_seconds: float
    is_overrun: bool
    drift_display: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_name": self.task_name,
            "task_end_time": format_iso(self.task_end_time),
            "remaining_seconds": round(self.remaining_seconds, 3),
            "is_overrun": self.is_overrun,
            "drift_display": self.drift_display,
        }
