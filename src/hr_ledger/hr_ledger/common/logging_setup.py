"""Logging configuration for the ledger.

Modules log through ``logging.getLogger(__name__)``; this installs a single
handler on the package logger so the host application decides the level.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

# Package root, whichever import path the package was loaded under.
ROOT_LOGGER_NAME = __name__.rsplit(".common", 1)[0]
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: Union[str, int] = "INFO") -> logging.Logger:
    global _handler

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)
    return logger
