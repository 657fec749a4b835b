"""
Centralized logging configuration for the routine runner.

This module provides standardized logging configuration using structlog
for all components. Timer phase changes and schedule drift mutations go
through the helpers at the bottom so every run leaves the same audit trail.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_timer_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for countdown and drift bookkeeping.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for the countdown state machine
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="countdown",
        audit_trail=True
    )


def log_phase_transition(
    logger: FilteringBoundLogger,
    task_id: str,
    from_phase: str,
    to_phase: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a timer phase transition with standardized format.

    Args:
        logger: Structlog logger instance
        task_id: ID of the task whose timer changed phase
        from_phase: Phase before the transition
        to_phase: Phase after the transition
        trigger: Operation that caused the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        task_id=task_id,
        from_phase=from_phase,
        to_phase=to_phase,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Timer phase transition")


def log_drift_change(
    logger: FilteringBoundLogger,
    task_id: Optional[str],
    delta: float,
    total: float,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a schedule drift mutation with standardized format.

    Args:
        logger: Structlog logger instance
        task_id: ID of the task being run when drift changed
        delta: Signed seconds applied (negative = ahead)
        total: Drift total after the change
        reason: What caused the change (completion, overrun_tick, suspension)
        context: Additional context data
    """
    bound_logger = logger.bind(
        task_id=task_id,
        drift_delta=round(delta, 3),
        drift_total=round(total, 3),
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Schedule drift updated")
