"""
Logging configuration for the application.

``setup_logging`` configures the root logger once with a console
handler and an optional file handler.  Errors that the API reports to
clients as ``UNAUTHENTICATED`` or ``BAD_USER_INPUT`` are part of normal
operation, so the GraphQL executor's error logger is filtered to keep
them out of the log; everything else it reports (unexpected faults)
still comes through with a traceback.
"""

import logging
from pathlib import Path
from typing import Optional

from graphql import GraphQLError

from .errors import USER_ERROR_CODES

EXECUTION_LOGGER = "strawberry.execution"


class UserErrorFilter(logging.Filter):
    """Drop log records for GraphQL errors raised on purpose by resolvers."""

    def filter(self, record: logging.LogRecord) -> bool:
        error = record.msg
        if isinstance(error, GraphQLError):
            code = (error.extensions or {}).get("code")
            if code in USER_ERROR_CODES:
                return False
        return True


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.
    """
    execution_logger = logging.getLogger(EXECUTION_LOGGER)
    if not any(isinstance(f, UserErrorFilter) for f in execution_logger.filters):
        execution_logger.addFilter(UserErrorFilter())

    logger = logging.getLogger()
    if logger.handlers:
        # Already configured, e.g. by uvicorn or an earlier create_app().
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
