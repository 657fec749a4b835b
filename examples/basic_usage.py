#!/usr/bin/env python3
"""
Basic Usage Example - Momentum Routine Runner

This script runs a three-task routine against a simulated clock, so the
whole run finishes instantly. It shows how to:
- Start a run and subscribe to snapshots
- Drive ticks, overrun a task and complete it
- Survive an app suspension that outlasts the countdown
- Read the final schedule drift and completion records

Run: python examples/basic_usage.py
"""

from datetime import datetime, timedelta, timezone

from momentum_app.logging.config import configure_logging
from momentum_app.presentation.stdout_presenter import StdoutPresenter
from momentum_app.runner import RoutineRunner
from momentum_app.state.models import Task


class SimulatedClock:
    """Wall clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 7, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def run_ticks(runner: RoutineRunner, clock: SimulatedClock, seconds: int) -> None:
    """Advance the clock one second at a time, ticking each second."""
    for _ in range(seconds):
        clock.advance(1)
        runner.tick()


def main() -> None:
    configure_logging(level="WARNING")

    clock = SimulatedClock()
    runner = RoutineRunner(clock=clock)
    runner.subscribe(StdoutPresenter(format="pretty"))

    tasks = [
        Task(id="stretch", name="Stretch", planned_duration=10),
        Task(id="shower", name="Shower", planned_duration=20),
        Task(id="make-bed", name="Make Bed", planned_duration=10),
    ]

    print("=" * 60)
    print("1. Start the routine and run the first task 5s over")
    print("=" * 60)
    runner.start_run(tasks)
    runner.start()
    run_ticks(runner, clock, 15)
    runner.mark_done()

    print("\n" + "=" * 60)
    print("2. Background the app for 30s with 15s left on the clock")
    print("=" * 60)
    run_ticks(runner, clock, 5)
    runner.app_did_enter_background()
    clock.advance(30)
    runner.app_did_enter_foreground()
    runner.mark_done()

    print("\n" + "=" * 60)
    print("3. Finish the last task immediately")
    print("=" * 60)
    snapshot = runner.mark_done()

    print(f"\nFinal: {snapshot.drift_display}")
    for completion in runner.completions():
        print(
            f"  {completion.name:<10} planned {completion.planned_seconds:>4.0f}s"
            f"  actual {completion.actual_seconds:>4.0f}s"
            f"  deviation {completion.deviation_seconds:+.0f}s"
        )


if __name__ == "__main__":
    main()
