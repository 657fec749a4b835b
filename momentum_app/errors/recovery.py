"""
Recovery strategy classifications for error handling.

These base classes categorize errors by their recovery characteristics
and guide how the runner reacts to them.
"""

from typing import Any, Dict, Optional


class RecoverableError(Exception):
    """Base for errors the runner absorbs without ending the run."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_action: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.context = context or {}
        self.recovery_action = recovery_action
        self.recoverable = True


class UnrecoverableError(Exception):
    """Base for errors that end the run or prevent it from starting."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False
