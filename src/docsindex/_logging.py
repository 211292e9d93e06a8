"""Logging configuration for docsindex.

This module provides consistent logging across the codebase.

Usage in other modules:
    import logging
    log = logging.getLogger(__name__)

    log.debug("Detailed info for debugging")
    log.info("General operational info")
    log.warning("Unexpected but handled situation")

The log level can be configured via the DOCSINDEX_LOG_LEVEL environment variable:
    - DEBUG: Skipped links, recovered front-matter, per-build details
    - INFO: Index builds and invalidations (default)
    - WARNING: Unexpected situations that were handled
    - ERROR: Errors that prevented an operation
"""

import logging
import os
import sys


def configure_logging(level_name: str | None = None) -> None:
    """Configure logging for the docsindex package.

    Call this once at application startup (e.g., in cli.py).
    Subsequent calls only adjust the level.

    Args:
        level_name: Explicit level name; falls back to DOCSINDEX_LOG_LEVEL.
    """
    root_logger = logging.getLogger("docsindex")

    level_name = (level_name or os.environ.get("DOCSINDEX_LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Prevent propagation to root logger (avoids duplicate messages)
    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Args:
        name: Module name (typically __name__).

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(name)
