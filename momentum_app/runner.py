"""
Routine runner coordinator.

Owns one run at a time and is the only entry point the host talks to.
Every operation runs to completion under a lock before the next one,
ticks included, and publishes a fresh snapshot afterwards. Subscribers
receive snapshots in the order the operations ran.

Caller-sequencing mistakes never escape: they are logged and the
operation becomes a no-op.
"""

import threading
from collections.abc import Sequence
from dataclasses import asdict
from datetime import datetime
from typing import Callable, Optional

import structlog

from .config.defaults import RunnerParams
from .config.validation import ConfigValidator
from .errors import (
    ConfigurationError,
    EmptyRoutineError,
    InconsistentSuspendStateError,
    NoActiveTaskError,
    SequencingError,
)
from .state.drift import ScheduleDriftAccumulator
from .state.models import LiveStatus, RunSnapshot, RunState, Task, TaskCompletion
from .state.projection import empty_snapshot, project_live_status, project_snapshot
from .state.reconciler import SuspensionReconciler
from .state.sequencer import TaskSequencer
from .state.timer import CountdownTimer
from .utils.time import Clock, wall_clock_now

logger = structlog.get_logger(__name__)

Subscriber = Callable[[RunSnapshot, LiveStatus], None]


class RoutineRunner:
    """
    Main coordinator for routine runs.

    Wires the countdown timer, drift accumulator, sequencer and suspension
    reconciler around a single RunState, and fans snapshots out to
    subscribers.
    """

    def __init__(self, params: Optional[RunnerParams] = None,
                 clock: Optional[Clock] = None) -> None:
        """Initialize the runner; raises ConfigurationError on bad params."""
        self.logger = logger
        self.params = params or RunnerParams()

        errors = ConfigValidator.validate_runner_params(asdict(self.params))
        if errors:
            raise ConfigurationError(
                "Invalid runner parameters",
                errors=errors,
                context={"errors": [f"{e.field}: {e.message}" for e in errors]},
            )

        self.clock = clock or wall_clock_now
        self.drift = ScheduleDriftAccumulator(self.params.drift_tolerance_seconds)
        self.timer = CountdownTimer(self.drift)
        self.sequencer = TaskSequencer(self.timer, self.drift, self.params.auto_start_next)
        self.reconciler = SuspensionReconciler(self.timer, self.drift)

        self._state: Optional[RunState] = None
        self._lock = threading.Lock()
        # held from state change through delivery so subscribers see operation order
        self._publish_lock = threading.RLock()
        self._subscribers: list[Subscriber] = []

        self.logger.info("Routine runner initialized", auto_start_next=self.params.auto_start_next)

    # -- observation -----------------------------------------------------

    @property
    def state(self) -> Optional[RunState]:
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a snapshot subscriber; returns a callable that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def snapshot(self, now: Optional[datetime] = None) -> RunSnapshot:
        with self._lock:
            return self._snapshot(self._now(now))

    def live_status(self, now: Optional[datetime] = None) -> LiveStatus:
        with self._lock:
            return self._live_status(self._now(now))

    def completions(self) -> list[TaskCompletion]:
        """Completion records of the current run, oldest first."""
        with self._lock:
            return list(self._state.completions) if self._state else []

    # -- run lifecycle ---------------------------------------------------

    def start_run(self, tasks: Sequence[Task], now: Optional[datetime] = None) -> RunSnapshot:
        """Discard any current run and start a fresh one on ``tasks``."""
        with self._publish_lock:
            with self._lock:
                now = self._now(now)
                if self._state is not None:
                    self.logger.info(
                        "Discarding previous run",
                        schedule_drift=round(self._state.schedule_drift, 3),
                        was_complete=self._state.is_complete
                    )
                try:
                    self._state = self.sequencer.start(tasks, now)
                except EmptyRoutineError as e:
                    self.logger.warning("Routine has no tasks", error=str(e))
                    self._state = None
                snapshot, live = self._snapshot(now), self._live_status(now)
            self._publish(snapshot, live)
        return snapshot

    # -- user operations -------------------------------------------------

    def start(self, now: Optional[datetime] = None) -> RunSnapshot:
        """Start or resume the current task's timer."""
        return self._run_operation("start", lambda state, ts: self.timer.start(state, ts), now)

    def pause(self, now: Optional[datetime] = None) -> RunSnapshot:
        """Pause the current task's timer."""
        return self._run_operation("pause", lambda state, ts: self.timer.pause(state, ts), now)

    def toggle(self, now: Optional[datetime] = None) -> RunSnapshot:
        """Pause if live, otherwise start."""
        def _toggle(state: RunState, ts: datetime) -> None:
            if state.is_live:
                self.timer.pause(state, ts)
            else:
                self.timer.start(state, ts)

        return self._run_operation("toggle", _toggle, now)

    def mark_done(self, now: Optional[datetime] = None) -> RunSnapshot:
        """Complete the current task and move on."""
        return self._run_operation(
            "mark_done", lambda state, ts: self.sequencer.complete_current(state, ts), now
        )

    def skip_current(self, now: Optional[datetime] = None) -> RunSnapshot:
        """Skip the current task; unused time is banked like a completion."""
        return self._run_operation(
            "skip", lambda state, ts: self.sequencer.complete_current(state, ts, skipped=True), now
        )

    def reset_current(self, now: Optional[datetime] = None) -> RunSnapshot:
        """Restart the current task's countdown. Drift is untouched."""
        return self._run_operation("reset", lambda state, ts: self.timer.reset_current(state), now)

    def tick(self, now: Optional[datetime] = None) -> RunSnapshot:
        """Periodic tick; a no-op while nothing is live."""
        return self._run_operation("tick", lambda state, ts: self.timer.tick(state, ts), now)

    # -- host lifecycle signals -------------------------------------------

    def app_will_resign_active(self, now: Optional[datetime] = None) -> RunSnapshot:
        """Advisory only; suspension is handled on entering background."""
        self.logger.info("App will resign active")
        return self.snapshot(now)

    def app_did_enter_background(self, now: Optional[datetime] = None) -> RunSnapshot:
        self.logger.info("App did enter background")
        return self._run_operation(
            "suspend", lambda state, ts: self.reconciler.on_suspend(state, ts), now
        )

    def app_did_enter_foreground(self, now: Optional[datetime] = None) -> RunSnapshot:
        self.logger.info("App did enter foreground")
        return self._run_operation(
            "resume", lambda state, ts: self.reconciler.on_resume(state, ts), now
        )

    # -- internals -------------------------------------------------------

    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self.clock()

    def _run_operation(self, name: str, operation: Callable[[RunState, datetime], object],
                       now: Optional[datetime]) -> RunSnapshot:
        with self._publish_lock:
            with self._lock:
                now = self._now(now)
                state = self._state
                try:
                    if state is None:
                        raise NoActiveTaskError(
                            f"Cannot {name}: no routine run", operation=name
                        )
                    operation(state, now)
                except SequencingError as e:
                    if name != "tick":
                        self.logger.warning(
                            "Operation ignored",
                            operation=name,
                            error_type=type(e).__name__,
                            error=str(e),
                            phase=e.phase
                        )
                except InconsistentSuspendStateError as e:
                    self.logger.error(
                        "Inconsistent suspend state, resetting current task",
                        operation=name,
                        error=str(e),
                        context=e.context,
                        recovery_action=e.recovery_action
                    )
                    self.timer.reset_current(state)
                snapshot, live = self._snapshot(now), self._live_status(now)
            self._publish(snapshot, live)
        return snapshot

    def _snapshot(self, now: datetime) -> RunSnapshot:
        if self._state is None:
            return empty_snapshot(self.drift, now)
        return project_snapshot(self._state, self.timer, self.drift, now)

    def _live_status(self, now: datetime) -> LiveStatus:
        if self._state is None:
            return project_live_status(
                RunState(tasks=()), self.timer, self.drift, now
            )
        return project_live_status(self._state, self.timer, self.drift, now)

    def _publish(self, snapshot: RunSnapshot, live: LiveStatus) -> None:
        for subscriber in list(self._subscribers):
            try:
                subscriber(snapshot, live)
            except Exception as e:
                self.logger.error(
                    "Snapshot subscriber failed",
                    subscriber=getattr(subscriber, "__qualname__", repr(subscriber)),
                    error=str(e)
                )
