"""Logging utilities for actionkit."""

import logging
import sys

from actionkit.constants import PACKAGE_LOGGER_NAME
from actionkit.logging.formatters import ActionContextFormatter
from actionkit.logging.handlers import CapturingLogHandler, record_context


def configure_logging(level: int | str = logging.INFO, stream=None) -> logging.Handler:
    """Send actionkit diagnostics to a stream.

    Parameters
    ----------
    level : int | str
        Level for the ``actionkit`` logger
    stream : TextIO | None
        Target stream, stderr by default

    Returns
    -------
    logging.Handler
        The installed handler, so callers can remove it again
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ActionContextFormatter("%(levelname)s %(name)s: %(message)s"))

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)

    return handler


__all__ = [
    "ActionContextFormatter",
    "CapturingLogHandler",
    "configure_logging",
    "record_context",
]
