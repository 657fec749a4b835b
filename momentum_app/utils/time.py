"""
Wall-clock time helpers.

Every elapsed-time computation in the runner goes through these functions
so that tests can drive the whole state machine from a fake clock.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def wall_clock_now() -> datetime:
    """
    Get the current wall-clock time.

    Returns:
        Current time as a UTC datetime
    """
    return datetime.now(timezone.utc)


def elapsed_seconds(start_time: datetime, end_time: Optional[datetime] = None) -> float:
    """
    Calculate elapsed time in seconds between two instants.

    Args:
        start_time: Start timestamp
        end_time: End timestamp, defaults to current wall-clock time

    Returns:
        Elapsed time in seconds (negative if end precedes start)
    """
    if end_time is None:
        end_time = wall_clock_now()

    return (end_time - start_time).total_seconds()


def add_seconds(instant: datetime, seconds: float) -> datetime:
    """Shift an instant by a signed number of seconds."""
    return instant + timedelta(seconds=seconds)


def format_wall_time(instant: datetime) -> str:
    """
    Format an instant as a short local clock time (HH:MM).

    Args:
        instant: Timestamp to format

    Returns:
        Clock time string in the instant's own timezone
    """
    return instant.strftime("%H:%M")


def format_iso(instant: Optional[datetime]) -> Optional[str]:
    """ISO8601 rendering for serialized snapshots, None passes through."""
    return instant.isoformat() if instant is not None else None
