"""
Routine-level failures.

Covers problems with the routine definition itself, with configuration, and
with the suspend/resume bookkeeping.
"""

from typing import Any, Optional

from .recovery import RecoverableError, UnrecoverableError


class EmptyRoutineError(UnrecoverableError):
    """A run was started with no tasks."""


class TaskDefinitionError(UnrecoverableError):
    """Raw task data could not be turned into a valid task."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, index: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.index = index


class ConfigurationError(UnrecoverableError):
    """Runner configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []


class InconsistentSuspendStateError(RecoverableError):
    """Resume found suspend data that contradicts the timer state.

    The runner recovers by resetting the current task's timer.
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recovery_action", "reset_current")
        super().__init__(message, **kwargs)
