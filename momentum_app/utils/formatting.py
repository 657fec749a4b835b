"""
Duration formatting for countdown and schedule displays.

Pure functions only; no state.
"""

import math

PLACEHOLDER = "--:--"


def format_duration(seconds: float) -> str:
    """
    Format a duration as MM:SS.

    The sign is dropped and the value is rounded to the nearest whole
    second, halves rounding up. Minutes are not wrapped into hours.

    Args:
        seconds: Duration in seconds

    Returns:
        "MM:SS" string, or "--:--" for non-finite input
    """
    if not math.isfinite(seconds):
        return PLACEHOLDER

    total_seconds = int(math.floor(abs(seconds) + 0.5))
    minutes, secs = divmod(total_seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_overrun(seconds: float) -> str:
    """
    Format time spent past the end of a countdown as "-M:SS".

    Partial seconds are truncated, so 7.9s past the end reads "-0:07".

    Args:
        seconds: Seconds past the countdown end (sign is ignored)

    Returns:
        Signed overrun string, or "--:--" for non-finite input
    """
    if not math.isfinite(seconds):
        return PLACEHOLDER

    whole = int(abs(seconds))
    minutes, secs = divmod(whole, 60)
    return f"-{minutes}:{secs:02d}"
