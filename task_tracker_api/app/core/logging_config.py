"""
Logging for the Task Tracker API.

Everything goes through the root logger.  Each request produces one
line from the request middleware in ``main`` (method, path, status and
duration), so uvicorn's own access log is turned down to warnings to
avoid logging every request twice.
"""

import logging
from pathlib import Path

from .config import Settings

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-7s %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Loggers that would duplicate or flood the request line.
QUIET_LOGGERS = ("uvicorn.access",)


def resolve_level(config: Settings) -> int:
    """Return the numeric root level; ``debug`` forces ``DEBUG``."""
    if config.debug:
        return logging.DEBUG
    return getattr(logging, config.log_level.upper(), logging.INFO)


def setup_logging(config: Settings) -> None:
    """Configure logging from ``config``.

    Handlers are attached once; later calls (tests build many apps)
    only adjust levels.
    """
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root = logging.getLogger()
    root.setLevel(resolve_level(config))
    if root.handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if config.log_file:
        file_handler = logging.FileHandler(Path(config.log_file).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
