"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import List

from momentum_app.runner import RoutineRunner
from momentum_app.config.defaults import RunnerParams
from momentum_app.state.drift import ScheduleDriftAccumulator
from momentum_app.state.models import Task
from momentum_app.state.reconciler import SuspensionReconciler
from momentum_app.state.sequencer import TaskSequencer
from momentum_app.state.timer import CountdownTimer


class FakeClock:
    """Controllable wall clock for driving the runner deterministically."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock starting at a fixed UTC instant."""
    return FakeClock(datetime(2024, 1, 1, 8, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def sample_tasks() -> List[Task]:
    """Three-task routine of 10s, 20s and 10s."""
    return [
        Task(id="task-1", name="Warm-up", planned_duration=10.0),
        Task(id="task-2", name="Main Exercise", planned_duration=20.0),
        Task(id="task-3", name="Cool Down", planned_duration=10.0),
    ]


@pytest.fixture
def drift() -> ScheduleDriftAccumulator:
    return ScheduleDriftAccumulator()


@pytest.fixture
def timer(drift) -> CountdownTimer:
    return CountdownTimer(drift)


@pytest.fixture
def sequencer(timer, drift) -> TaskSequencer:
    return TaskSequencer(timer, drift, auto_start_next=True)


@pytest.fixture
def reconciler(timer, drift) -> SuspensionReconciler:
    return SuspensionReconciler(timer, drift)


@pytest.fixture
def runner(clock) -> RoutineRunner:
    """Runner on the fake clock with default parameters."""
    return RoutineRunner(RunnerParams(), clock=clock)


@pytest.fixture
def tick_for(runner, clock):
    """Advance the clock one second at a time, ticking after each step."""
    def _tick_for(seconds: int) -> None:
        for _ in range(seconds):
            clock.advance(1)
            runner.tick()
    return _tick_for
