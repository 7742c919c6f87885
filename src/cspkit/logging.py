"""Logging configuration for the command-line tool."""

import logging
import os
import sys

# Configuration from environment
LOG_FILE = os.environ.get("CSPKIT_LOG_FILE")
VERBOSE = os.environ.get("CSPKIT_VERBOSE", "0") == "1"

# Module-level state (initialized by init_logging)
logger: logging.Logger = None


def init_logging(verbose: bool = False) -> logging.Logger:
    """Initialize logging for the cspkit package. Returns the package logger."""
    global logger

    logger = logging.getLogger("cspkit")
    logger.setLevel(logging.DEBUG if verbose or VERBOSE else logging.INFO)
    logger.propagate = False
    logger.handlers.clear()
    if LOG_FILE:
        handler = logging.FileHandler(LOG_FILE)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(asctime)s %(message)s'))
    logger.addHandler(handler)

    return logger


def close_logging():
    """Close logging handlers."""
    if logger is None:
        return
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
