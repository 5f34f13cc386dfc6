"""
Package logger for circular_estimation.

Module loggers are children of the ``circular_estimation`` logger, which
owns the only handler. Numerical fallbacks are reported through warnings,
the logger carries debug messages such as coefficient padding
and resampling decisions.
"""

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

PACKAGE_LOGGER = "circular_estimation"


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: str = "WARNING",
    use_rich: bool = True,
) -> logging.Logger:
    """
    Configure a logger with a single handler.

    Calling it again on a configured logger only changes the level.

    Parameters
    ----------
    name : str
        Logger name
    level : str
        Level name, e.g. "DEBUG" or "warning"
    use_rich : bool
        Render through a RichHandler on stderr instead of a plain
        StreamHandler on stdout

    Returns
    -------
    logging.Logger
        The configured logger, with propagation switched off
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    if logger.handlers:
        return logger

    if use_rich:
        handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger ``name`` (default: the package logger), configuring the package logger on first use."""
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        setup_logger()

    return logging.getLogger(name or PACKAGE_LOGGER)
