"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """Compact timestamp for directory and file names (e.g., "20251114_123456")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def today() -> str:
    """Date stamp for dated output directories (e.g., "2025-11-14")."""
    return datetime.now().strftime("%Y-%m-%d")


def format_elapsed(seconds: float) -> str:
    """
    Format an elapsed duration compactly.

    Examples:
        format_elapsed(0.42)   # "420ms"
        format_elapsed(3.2)    # "3.20s"
        format_elapsed(95)     # "1m 35s"
    """
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.2f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {int(seconds % 60)}s"
