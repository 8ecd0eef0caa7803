"""
Loguru sinks for quire entry points.

Each run gets a DEBUG log file named after its context and, unless disabled,
an INFO console sink. The file opens with a provenance block so a log can be
traced back to the command and quire version that wrote it. Prefixed wrappers
live in contexts/{context}/logger.py; algorithms never call this module.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv
from loguru import logger

from quire import __version__

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

CONSOLE_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

RULE = "=" * 80


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, str]] = None,
    console: bool = True,
) -> Path:
    """
    Replace all loguru sinks with a run log for one context.

    Args:
        context_name: Log file stem ("timeline", "layout", "render")
        log_dir: Directory for this run, created if missing
        extra_provenance: Extra "key: value" lines for the provenance block
        console: Also send INFO and above to stdout

    Returns:
        Path to the log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in CONSOLE_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    if console:
        logger.add(sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    for line in provenance_lines(extra_provenance):
        logger.info(line)

    return log_file


def provenance_lines(extra: Optional[Dict[str, str]] = None) -> List[str]:
    """Header block for a run log: command, working directory and versions."""
    lines = [
        RULE,
        f"quire: {__version__}",
        f"Command: {' '.join(sys.argv)}",
        f"Working directory: {Path.cwd()}",
        f"Python: {sys.version.split()[0]}",
    ]
    lines.extend(f"{key}: {value}" for key, value in (extra or {}).items())
    lines.append(RULE)
    return lines
