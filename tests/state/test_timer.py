"""Tests for the countdown timer."""

import pytest

from momentum_app.errors import (
    AlreadyRunningError,
    NoActiveTaskError,
    NotRunningError,
    RoutineCompleteError,
)
from momentum_app.state.models import ROUTINE_COMPLETE, RunState, Task, TimerPhase
from momentum_app.utils.time import add_seconds


@pytest.fixture
def task():
    return Task(id="t1", name="Plank", planned_duration=10.0)


@pytest.fixture
def state(timer, task):
    state = RunState(tasks=(task,))
    state.task_index = 0
    timer.configure(state, task)
    return state


@pytest.fixture
def t0(clock):
    return clock.now


def at(t0, seconds):
    return add_seconds(t0, seconds)


class TestConfigure:
    """Test loading a task into the timer."""

    def test_configure_sets_full_duration(self, timer, state, task):
        """Test a configured timer is idle with the full duration."""
        assert state.timer_phase == TimerPhase.IDLE
        assert state.countdown_basis == task.planned_duration
        assert state.running_since is None
        assert state.paused_remaining is None
        assert state.is_overrun is False

    def test_configure_clears_previous_timer(self, timer, state, t0):
        """Test configure drops leftover running data."""
        timer.start(state, t0)
        timer.configure(state, Task(id="t2", name="Squats", planned_duration=5.0))
        assert state.timer_phase == TimerPhase.IDLE
        assert state.running_since is None
        assert state.countdown_basis == 5.0


class TestStartPause:
    """Test starting, pausing and resuming."""

    def test_start_from_idle(self, timer, state, t0):
        """Test a fresh start counts down the planned duration."""
        timer.start(state, t0)
        assert state.timer_phase == TimerPhase.RUNNING
        assert state.running_since == t0
        assert state.countdown_basis == 10.0
        assert timer.remaining(state, at(t0, 3)) == 7.0

    def test_start_twice_raises(self, timer, state, t0):
        """Test starting a live timer is rejected."""
        timer.start(state, t0)
        with pytest.raises(AlreadyRunningError) as exc_info:
            timer.start(state, at(t0, 1))
        assert exc_info.value.phase == "running"
        assert state.running_since == t0

    def test_start_in_overrun_raises(self, timer, state, t0):
        """Test starting during overrun is rejected."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        with pytest.raises(AlreadyRunningError):
            timer.start(state, at(t0, 11))

    def test_pause_records_remaining(self, timer, state, t0):
        """Test pausing freezes the remaining time."""
        timer.start(state, t0)
        timer.pause(state, at(t0, 4))
        assert state.timer_phase == TimerPhase.PAUSED
        assert state.paused_remaining == 6.0
        assert state.running_since is None
        assert timer.remaining(state, at(t0, 100)) == 6.0

    def test_resume_counts_from_paused_remaining(self, timer, state, t0):
        """Test a resume counts down what was left."""
        timer.start(state, t0)
        timer.pause(state, at(t0, 4))
        timer.start(state, at(t0, 20))
        assert state.timer_phase == TimerPhase.RUNNING
        assert state.countdown_basis == 6.0
        assert state.paused_remaining is None
        assert timer.remaining(state, at(t0, 22)) == 4.0

    def test_pause_when_idle_raises(self, timer, state, t0):
        """Test pausing an idle timer is rejected."""
        with pytest.raises(NotRunningError):
            timer.pause(state, t0)
        assert state.timer_phase == TimerPhase.IDLE

    def test_pause_when_paused_raises(self, timer, state, t0):
        """Test pausing twice is rejected and leaves the paused time alone."""
        timer.start(state, t0)
        timer.pause(state, at(t0, 2))
        with pytest.raises(NotRunningError):
            timer.pause(state, at(t0, 5))
        assert state.paused_remaining == 8.0

    def test_pause_after_zero_clamps(self, timer, state, t0):
        """Test a late pause without a tick clamps remaining at zero."""
        timer.start(state, t0)
        timer.pause(state, at(t0, 12))
        assert state.paused_remaining == 0.0

    def test_no_task_raises(self, timer, t0):
        """Test timer operations need a current task."""
        state = RunState(tasks=())
        with pytest.raises(NoActiveTaskError):
            timer.start(state, t0)

    def test_complete_routine_raises(self, timer, state, t0):
        """Test timer operations are refused after completion."""
        state.task_index = ROUTINE_COMPLETE
        with pytest.raises(RoutineCompleteError):
            timer.start(state, t0)


class TestTickAndOverrun:
    """Test tick processing and overrun accounting."""

    def test_tick_when_idle(self, timer, state, t0):
        """Test ticks are ignored while nothing is live."""
        assert timer.tick(state, t0) is False
        assert state.schedule_drift == 0.0

    def test_tick_while_counting_down(self, timer, state, t0):
        """Test ticks before zero change nothing."""
        timer.start(state, t0)
        for second in range(1, 10):
            assert timer.tick(state, at(t0, second)) is True
        assert state.timer_phase == TimerPhase.RUNNING
        assert state.schedule_drift == 0.0

    def test_transition_tick_is_not_charged(self, timer, state, t0):
        """Test reaching zero enters overrun without charging drift."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        assert state.timer_phase == TimerPhase.OVERRUN
        assert state.is_overrun is True
        assert state.overrun_baseline == at(t0, 10)
        assert state.overrun_began_at == at(t0, 10)
        assert state.schedule_drift == 0.0
        assert timer.remaining(state, at(t0, 10)) == 0.0

    def test_late_transition_records_true_zero_instant(self, timer, state, t0):
        """Test a delayed first tick still records when zero was reached."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 13))
        assert state.overrun_began_at == at(t0, 10)
        assert state.overrun_baseline == at(t0, 13)

    def test_overrun_charges_one_second_per_tick(self, timer, state, t0):
        """Test each second past zero is charged once."""
        timer.start(state, t0)
        for second in range(1, 16):
            timer.tick(state, at(t0, second))
        assert state.schedule_drift == 5.0
        assert state.task_drift == 5.0

    def test_fractional_ticks_never_lose_seconds(self, timer, state, t0):
        """Test irregular tick spacing charges whole seconds without drift loss."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        for offset in (0.6, 1.2, 1.8, 2.4, 3.0, 3.6):
            timer.tick(state, at(t0, 10 + offset))
        assert state.schedule_drift == 3.0
        assert state.overrun_baseline == at(t0, 13)

    def test_delayed_tick_charges_all_whole_seconds(self, timer, state, t0):
        """Test a single late tick charges every whole second since the baseline."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        timer.tick(state, at(t0, 14.5))
        assert state.schedule_drift == 4.0
        assert state.overrun_baseline == at(t0, 14)

    def test_pause_during_overrun_catches_up(self, timer, state, t0):
        """Test pausing in overrun charges pending seconds and keeps the flag."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        timer.tick(state, at(t0, 11))
        timer.pause(state, at(t0, 13.5))
        assert state.schedule_drift == 3.0
        assert state.timer_phase == TimerPhase.PAUSED
        assert state.is_overrun is True
        assert state.paused_remaining == 0.0
        assert state.overrun_baseline is None

    def test_paused_overrun_is_not_charged(self, timer, state, t0):
        """Test time spent paused in overrun is not charged."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        timer.pause(state, at(t0, 11))
        assert timer.tick(state, at(t0, 60)) is False
        assert state.schedule_drift == 1.0

    def test_resume_into_overrun(self, timer, state, t0):
        """Test resuming with nothing left goes straight into overrun."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        timer.pause(state, at(t0, 11))
        timer.start(state, at(t0, 100))
        assert state.timer_phase == TimerPhase.OVERRUN
        assert state.overrun_baseline == at(t0, 100)
        timer.tick(state, at(t0, 102))
        assert state.schedule_drift == 3.0

    def test_missing_baseline_reanchors(self, timer, state, t0):
        """Test overrun without a baseline re-anchors rather than charging."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        state.overrun_baseline = None
        timer.tick(state, at(t0, 15))
        assert state.schedule_drift == 0.0
        assert state.overrun_baseline == at(t0, 15)

    def test_overrun_never_reverts_to_running(self, timer, state, t0):
        """Test a positive remaining observed in overrun keeps overrun."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        state.countdown_basis = 100.0
        timer.tick(state, at(t0, 11))
        assert state.timer_phase == TimerPhase.OVERRUN


class TestResetAndDone:
    """Test resetting and completing the current task."""

    def test_reset_restores_full_duration(self, timer, state, t0):
        """Test reset returns the timer to idle at full duration."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        timer.tick(state, at(t0, 12))
        timer.reset_current(state)
        assert state.timer_phase == TimerPhase.IDLE
        assert state.is_overrun is False
        assert state.countdown_basis == 10.0
        assert timer.remaining(state, at(t0, 12)) == 10.0

    def test_reset_keeps_drift(self, timer, state, t0):
        """Test reset never refunds drift already charged."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        timer.tick(state, at(t0, 12))
        timer.reset_current(state)
        assert state.schedule_drift == 2.0
        assert state.task_drift == 2.0

    def test_done_early_banks_unused_time(self, timer, state, t0):
        """Test finishing early banks the unused seconds as ahead."""
        timer.start(state, t0)
        completion = timer.mark_done(state, at(t0, 4))
        assert state.schedule_drift == -6.0
        assert completion.unused_seconds == 6.0
        assert completion.actual_seconds == 4.0
        assert completion.deviation_seconds == -6.0
        assert completion.skipped is False
        assert state.completions == [completion]

    def test_done_while_paused_uses_paused_remaining(self, timer, state, t0):
        """Test a paused task banks its frozen remaining time."""
        timer.start(state, t0)
        timer.pause(state, at(t0, 3))
        timer.mark_done(state, at(t0, 50))
        assert state.schedule_drift == -7.0

    def test_done_without_starting_banks_full_duration(self, timer, state, t0):
        """Test completing an untouched task banks its whole duration."""
        timer.mark_done(state, t0)
        assert state.schedule_drift == -10.0

    def test_done_in_overrun_banks_nothing(self, timer, state, t0):
        """Test completing late adds nothing beyond the overrun charges."""
        timer.start(state, t0)
        for second in range(1, 16):
            timer.tick(state, at(t0, second))
        completion = timer.mark_done(state, at(t0, 15))
        assert state.schedule_drift == 5.0
        assert completion.unused_seconds == 0.0
        assert completion.actual_seconds == 15.0

    def test_done_clears_timer(self, timer, state, t0):
        """Test completion leaves the timer cleared."""
        timer.start(state, t0)
        timer.mark_done(state, at(t0, 2))
        assert state.timer_phase == TimerPhase.IDLE
        assert state.running_since is None
        assert state.task_drift == 0.0

    def test_skip_is_flagged(self, timer, state, t0):
        """Test a skip is recorded as such and banks like a completion."""
        completion = timer.mark_done(state, t0, skipped=True)
        assert completion.skipped is True
        assert state.schedule_drift == -10.0


class TestPauseResumeWithoutElapsedTime:
    """Test that pause/resume at a single instant never moves the schedule."""

    def test_running_pause_resume_loop(self, timer, state, t0):
        """Test repeated pause/resume while counting down changes nothing."""
        timer.start(state, t0)
        instant = at(t0, 3)
        for _ in range(5):
            timer.pause(state, instant)
            assert state.paused_remaining == 7.0
            timer.start(state, instant)
            assert timer.remaining(state, instant) == 7.0
        assert state.schedule_drift == 0.0
        assert state.timer_phase == TimerPhase.RUNNING

    def test_overrun_pause_resume_loop(self, timer, state, t0):
        """Test repeated pause/resume in overrun charges nothing further."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        timer.tick(state, at(t0, 12))
        assert state.schedule_drift == 2.0

        instant = at(t0, 12.5)
        for _ in range(5):
            timer.pause(state, instant)
            assert state.paused_remaining == 0.0
            timer.start(state, instant)
            assert timer.remaining(state, instant) == 0.0
        assert state.schedule_drift == 2.0
        assert state.timer_phase == TimerPhase.OVERRUN
        assert state.overrun_baseline == instant


class TestResumeAtZero:
    """Test resuming a task paused at exactly zero before any tick."""

    def test_zero_instant_is_recorded(self, timer, state, t0):
        """Test a resume into overrun records when overrun began."""
        timer.start(state, t0)
        timer.pause(state, at(t0, 10))
        assert state.is_overrun is False
        timer.start(state, at(t0, 20))
        assert state.timer_phase == TimerPhase.OVERRUN
        assert state.overrun_began_at == at(t0, 20)

    def test_existing_zero_instant_is_kept(self, timer, state, t0):
        """Test a resume does not move an already recorded zero instant."""
        timer.start(state, t0)
        timer.tick(state, at(t0, 10))
        timer.pause(state, at(t0, 11))
        timer.start(state, at(t0, 30))
        assert state.overrun_began_at == at(t0, 10)
