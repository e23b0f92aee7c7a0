"""
Structured logging with DEBUG/INFO levels via LOG_LEVEL env var.
Uses RichHandler on stderr so log lines never mix with the probe report on stdout.
"""

import os
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "cpuprobe"


def _resolve_level(verbose: bool = False, debug: bool = False) -> int:
    """Map LOG_LEVEL / VERBOSE env vars (and the CLI flags) to a logging level."""
    log_level_str = "debug" if debug else os.getenv("LOG_LEVEL", "info").lower()
    verbose_mode = verbose or os.getenv("VERBOSE", "").lower() in ("1", "true", "yes")

    # In default mode (not verbose), only show WARNING and above
    if not verbose_mode and log_level_str != "debug":
        return logging.WARNING
    return logging.DEBUG if log_level_str == "debug" else logging.INFO


def setup_logger(
    name: str = __name__, console: Optional[Console] = None, verbose: bool = False
) -> logging.Logger:
    """
    Set up structured logging with LOG_LEVEL env var support.

    Args:
        name: Logger name (typically __name__)
        console: Optional Rich Console instance (a stderr console is created if not provided)
        verbose: If True, show INFO logs even in default mode.

    Returns:
        Configured logger instance
    """
    log_level = _resolve_level(verbose)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Avoid adding multiple handlers if logger already configured
    if not logger.handlers:
        handler = RichHandler(
            console=console or Console(stderr=True),
            rich_tracebacks=True,
            show_time=False,
            show_level=True,
            show_path=False,
            markup=False,
        )
        handler.setLevel(log_level)
        logger.addHandler(handler)
        # Module loggers own their handler; don't repeat records on the root logger
        logger.propagate = False

    return logger


def refresh_log_levels(verbose: bool = False, debug: bool = False) -> None:
    """
    Re-apply the LOG_LEVEL env var to every cpuprobe logger.

    Module loggers are configured at import time, before the CLI has parsed
    --debug / --verbose, so the CLI calls this once flags are known.
    """
    log_level = _resolve_level(verbose, debug)
    for name in list(logging.Logger.manager.loggerDict):
        if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
            continue
        logger = logging.getLogger(name)
        logger.setLevel(log_level)
        for handler in logger.handlers:
            handler.setLevel(log_level)
