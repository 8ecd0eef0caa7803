"""
Shared utilities for QUIRE.

Common functionality used across contexts:
- Logger setup
- Configuration loading
- PDF inspection
- Timestamps
"""

from quire.utils.timestamp import format_elapsed, now, today

__all__ = ["format_elapsed", "now", "today"]
