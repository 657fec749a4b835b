"""
Momentum - Routine Runner Engine

Runs a user through an ordered routine of timed tasks. Tracks a countdown
per task that may run past zero, and keeps a running schedule drift that
says how far ahead of or behind plan the whole routine is, including
across app suspension.
"""

__version__ = "0.1.0"
__author__ = "Momentum Team"
