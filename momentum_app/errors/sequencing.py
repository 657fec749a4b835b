"""
Caller-sequencing errors.

Raised when an operation arrives in a state that does not accept it, e.g.
pausing a timer that is not running. The runner logs these and treats the
operation as a no-op; no state is touched before they are raised.
"""

from typing import Optional

from .recovery import RecoverableError


class SequencingError(RecoverableError):
    """Operation is not valid in the current run state."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 phase: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.phase = phase


class NoActiveTaskError(SequencingError):
    """No task is current: the run has not started or has no tasks."""


class AlreadyRunningError(SequencingError):
    """Timer start requested while the countdown is already live."""


class NotRunningError(SequencingError):
    """Timer pause requested while the countdown is not live."""


class RoutineCompleteError(SequencingError):
    """Operation attempted after the routine reached its complete state."""
