"""
================================================================================
UI Test Tools Common Utilities
================================================================================

Logging setup and small filesystem helpers shared by the framework and the
test runner.

Exports:
    - init_logger: Configure loguru sinks once per process
    - ensure_directory: Create a directory if needed and return it

Usage:
    from uitest_tools.common import init_logger

    init_logger()                                  # LOG_LEVEL / LOG_FILE env
    init_logger(level="DEBUG", log_file="logs/ui.log")

================================================================================
"""

import os
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# ============================================================
# Logging Setup
# ============================================================

_logger_initialized = False


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    force: bool = False,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL or INFO.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to. Defaults to LOG_FILE.
        rotation: Rotation policy for the file sink
        retention: Retention policy for the file sink
        force: Re-initialize even if already configured

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/ui.log")
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    # Remove default handler
    logger.remove()

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    format_string = format_string or DEFAULT_FORMAT

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    log_file = log_file or os.getenv("LOG_FILE")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=rotation,
            retention=retention,
            enqueue=True,
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized (level={level}, file={log_file or '-'})")


# ============================================================
# Common Utilities
# ============================================================

def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensures a directory exists, creating it if necessary.

    Returns:
        The path as a Path (for chaining)
    """
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


__all__ = [
    "DEFAULT_FORMAT",
    "init_logger",
    "ensure_directory",
]
