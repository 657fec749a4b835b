"""
Logging configuration and utilities for the routine runner.
"""
from .config import configure_logging, get_logger, get_timer_logger

__all__ = ["configure_logging", "get_logger", "get_timer_logger"]
