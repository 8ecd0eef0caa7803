"""
Layout context logger.

Provides logging interface for layout context with automatic [layout] prefix.
All layout modules should import from this module, not from utils.logger directly.
"""

import math
from pathlib import Path

from loguru import logger

from quire.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[layout]"


def setup_layout_logger(log_dir: Path) -> Path:
    """
    Setup logger for layout context.

    Args:
        log_dir: Directory for this session

    Returns:
        Path to log file
    """
    return _setup_logger(context_name="layout", log_dir=log_dir)


# Wrapper functions with automatic [layout] prefix


def _log_info(message: str) -> None:
    """Log info message with [layout] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [layout] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [layout] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [layout] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level layout-specific logging helpers


def log_strategy(job_count: int, has_certificates: bool, strategy) -> None:
    """Log the chosen layout strategy."""
    _log_info(
        f"Strategy for {job_count} job(s), certificates={has_certificates}: {strategy}"
    )


def log_solver_report(
    static_total: float,
    page_height: float,
    target_pages: int,
    result,  # AllocationResult
) -> None:
    """
    Log the allocation report: fixed space, chosen config, per-page use and overall fill.

    Args:
        static_total: Height of everything that does not depend on the allocation
        page_height: Printable page height
        target_pages: Page budget
        result: AllocationResult from allocate()
    """
    simulation = result.simulation
    total_available = target_pages * page_height
    fill_percent = simulation.total_used(page_height) / total_available * 100 if total_available else 0.0

    _log_info("=== Layout report ===")
    _log_info(
        f"1. Static height: {round(static_total)}px "
        f"(about {math.ceil(static_total / page_height)} page(s))"
    )
    if static_total > page_height * max(target_pages - 1, 1):
        _log_warning(
            f"   Static content alone exceeds {max(target_pages - 1, 1)} page(s); bullets will be squeezed"
        )
    _log_info(
        f"2. Config: {list(result.config)} "
        f"(danger zone {result.danger_zone_height:g}px, {result.simulation_calls} simulations)"
    )
    for page_number, used in enumerate(simulation.page_heights, 1):
        _log_debug(f"   Page {page_number}: {used:.1f}/{page_height:g}px")
    summary = f"3. Pages: {simulation.page_count}/{target_pages}, overall fill {fill_percent:.1f}%"
    if result.fits:
        _log_success(summary)
    else:
        _log_warning(summary)
