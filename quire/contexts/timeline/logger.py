"""
Timeline context logger.

Provides logging interface for timeline context with automatic [timeline] prefix.
All timeline modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from quire.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[timeline]"


def setup_timeline_logger(log_dir: Path) -> Path:
    """
    Setup logger for timeline context.

    Args:
        log_dir: Directory for this session

    Returns:
        Path to log file
    """
    return _setup_logger(context_name="timeline", log_dir=log_dir)


# Wrapper functions with automatic [timeline] prefix


def _log_info(message: str) -> None:
    """Log info message with [timeline] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [timeline] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [timeline] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level timeline-specific logging helpers


def log_filler_added(reason: str, start: str, end: str, years: float, **context) -> None:
    """Log a synthesized segment with the reason it was needed."""
    details = ", ".join(f"{key}={value}" for key, value in context.items())
    _log_debug(f"Filler added ({reason}): {start} -> {end} ({years}y){'; ' + details if details else ''}")


def log_prepend_check(
    required_min: float, first_start: str, span_years: float, will_prepend: bool
) -> None:
    """Log the decision on whether history must be extended backwards."""
    _log_debug(
        f"Prepend check: required {required_min}y, first start {first_start}, "
        f"span to now {span_years}y -> {'prepend' if will_prepend else 'no prepend'}"
    )


def log_timeline_summary(result) -> None:
    """
    Log the reconciled timeline.

    Args:
        result: TimelineResult from reconcile_timeline()
    """
    synthesized = [s for s in result.segments if s.is_synthesized]
    _log_info(
        f"Timeline reconciled: {len(result.segments)} segments "
        f"({len(synthesized)} synthesized, {result.supplement_years}y), "
        f"total {result.final_total_years}y"
    )
    for segment in result.segments:
        _log_debug(f"  {segment}")
