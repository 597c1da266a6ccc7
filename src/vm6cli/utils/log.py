"""Logging setup for the vm6cli package."""

import logging

from rich.logging import RichHandler

from .output import err_console

PACKAGE_LOGGER = "vm6cli"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Route package log records to stderr through Rich.

    Args:
        debug: Show DEBUG records (retry delays, task polls, HTTP calls)

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
