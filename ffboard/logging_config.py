"""Logging setup for the ffboard command line."""

from __future__ import annotations

import logging
import sys


def setup_logging(level: int = logging.INFO, verbose: bool = False) -> logging.Logger:
    """Configure the ``ffboard`` logger with a single console handler.

    Verbose mode switches to DEBUG and the detailed format with source
    location. Calling this again replaces the previous handler.
    """
    logger = logging.getLogger("ffboard")
    logger.setLevel(logging.DEBUG if verbose else level)
    logger.handlers = []

    if verbose:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
