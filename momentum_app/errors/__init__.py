"""
Error classification system for the routine runner.

This module provides the exception hierarchy for caller-sequencing mistakes,
routine definition problems and suspension bookkeeping failures.
"""

from .recovery import (
    RecoverableError,
    UnrecoverableError,
)
from .sequencing import (
    SequencingError,
    NoActiveTaskError,
    AlreadyRunningError,
    NotRunningError,
    RoutineCompleteError,
)
from .routine_failures import (
    EmptyRoutineError,
    InconsistentSuspendStateError,
    TaskDefinitionError,
    ConfigurationError,
)

__all__ = [
    # Recovery Categories
    "RecoverableError",
    "UnrecoverableError",
    # Sequencing Errors
    "SequencingError",
    "NoActiveTaskError",
    "AlreadyRunningError",
    "NotRunningError",
    "RoutineCompleteError",
    # Routine Failures
    "EmptyRoutineError",
    "InconsistentSuspendStateError",
    "TaskDefinitionError",
    "ConfigurationError",
]
