"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from quire.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path) -> Path:
    """Set up the render run log; the provenance block records which layout config was used."""
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"Layout config": os.getenv("QUIRE_LAYOUT_CONFIG") or "packaged default"},
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(resume_name: str, config, danger_zone_height: float) -> None:
    """Log start of the final render with its allocation."""
    _log_info(f"Rendering {resume_name}")
    _log_debug(f"  Config: {list(config)}")
    _log_debug(f"  Danger zone: {danger_zone_height:g}px")


def log_render_result(resume_name: str, rendered, elapsed_time: float) -> None:
    """
    Log the final render.

    Args:
        resume_name: Resume identifier
        rendered: RenderedDocument from the backend
        elapsed_time: Time taken to render
    """
    _log_success(
        f"{resume_name}: {rendered.page_count} page(s), "
        f"{len(rendered.pdf_bytes) / 1024:.1f} KiB ({elapsed_time:.2f}s)"
    )
    _log_debug(f"  Placed {len(rendered.placements)} blocks")


def log_validation_start(resume_name: str, target_pages: int, danger_zone_height: float) -> None:
    """Log start of validation with context."""
    _log_info(f"Validating {resume_name}")
    _log_debug(f"  Target pages: {target_pages}")
    _log_debug(f"  Danger zone: {danger_zone_height:g}px")


def log_validation_result(
    resume_name: str,
    result,  # ValidationResult
    verbose: bool = False,
) -> None:
    """
    Log validation result with diagnostics.

    Validation never fails a generation; issues are reported as warnings.

    Args:
        resume_name: Resume identifier
        result: ValidationResult from validate_layout()
        verbose: Show every issue (default: first 5)
    """
    if result.is_valid:
        _log_success(
            f"Layout check passed: {result.page_count} page(s), "
            f"last page {result.last_page_fill:.0%} full"
        )
        return

    issues = result.issues
    _log_warning(f"{resume_name}: {len(issues)} layout issue(s)")
    issue_limit = len(issues) if verbose else 5
    for i, issue in enumerate(issues[:issue_limit], 1):
        _log_warning(f"  Issue {i}: {issue}")
    if len(issues) > issue_limit:
        _log_warning(f"  ... and {len(issues) - issue_limit} more issues")
