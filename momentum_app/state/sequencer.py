"""
Task sequencing for a routine run.

Owns the position in the task list. Positions only move forward; moving
past the last task puts the run into its terminal complete state.
"""

from collections.abc import Sequence
from datetime import datetime

import structlog

from ..errors import EmptyRoutineError
from ..logging.config import get_timer_logger
from .drift import ScheduleDriftAccumulator
from .models import NOT_STARTED, ROUTINE_COMPLETE, RunState, Task, TaskCompletion
from .timer import CountdownTimer

logger = structlog.get_logger(__name__)
timer_logger = get_timer_logger(__name__)


class TaskSequencer:
    """Creates runs and moves them through their task list."""

    def __init__(self, timer: CountdownTimer, drift: ScheduleDriftAccumulator,
                 auto_start_next: bool = True):
        self.timer = timer
        self.drift = drift
        self.auto_start_next = auto_start_next
        self.logger = timer_logger

    def start(self, tasks: Sequence[Task], now: datetime) -> RunState:
        """
        Create a fresh run positioned on the first task, timer idle.

        Raises:
            EmptyRoutineError: no tasks were supplied
        """
        if not tasks:
            raise EmptyRoutineError("Cannot start a routine with no tasks")

        state = RunState(tasks=tuple(tasks), started_at=now)
        state.task_index = 0
        self.timer.configure(state, state.tasks[0])

        self.logger.info(
            "Routine run started",
            task_count=len(state.tasks),
            planned_total=sum(t.planned_duration for t in state.tasks),
            first_task=state.tasks[0].name
        )
        return state

    def current_task(self, state: RunState) -> Task:
        """
        Get the task being run.

        Raises:
            NoActiveTaskError: run not started
            RoutineCompleteError: run already complete
        """
        return state.require_task("read current task")

    def advance(self, state: RunState, now: datetime) -> None:
        """
        Move to the next task, or complete the routine after the last one.

        The next task's timer is started immediately when ``auto_start_next``
        is set.
        """
        state.require_task("advance")

        next_index = state.task_index + 1
        if next_index >= len(state.tasks):
            self.complete_routine(state, now)
            return

        state.task_index = next_index
        task = state.tasks[next_index]
        self.timer.configure(state, task)
        self.logger.info(
            "Advanced to next task",
            task_id=task.id,
            task_name=task.name,
            position=next_index + 1,
            task_count=len(state.tasks)
        )

        if self.auto_start_next:
            self.timer.start(state, now)

    def complete_current(self, state: RunState, now: datetime,
                         skipped: bool = False) -> TaskCompletion:
        """Finish the current task, bank its unused time, then advance."""
        completion = self.timer.mark_done(state, now, skipped=skipped)
        self.advance(state, now)
        return completion

    def complete_routine(self, state: RunState, now: datetime) -> None:
        """Stop the timer and freeze drift; the run accepts nothing further."""
        state.clear_timer()
        state.task_index = ROUTINE_COMPLETE
        state.completed_at = now

        self.logger.info(
            "Routine complete",
            schedule_drift=round(state.schedule_drift, 3),
            drift_display=self.drift.format(state.schedule_drift),
            completed_tasks=len(state.completions)
        )

    @staticmethod
    def has_started(state: RunState) -> bool:
        return state.task_index != NOT_STARTED
