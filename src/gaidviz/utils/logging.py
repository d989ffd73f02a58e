"""Logger access and one-shot console setup for gaidviz.

Modules only ever call get_logger(__name__). The dashboard entry point
calls configure_logging() once; when gaidviz is embedded in another app,
that app's handlers receive the records instead. No log files are written.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "gaidviz"
LOG_LEVEL_ENV = "GAIDVIZ_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

Level = Union[str, int]


def _resolve_level(level: Optional[Level]) -> int:
    """Explicit level, else $GAIDVIZ_LOG_LEVEL, else INFO. Unknown names map to INFO."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def _stderr_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]


def configure_logging(
    level: Optional[Level] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """Send gaidviz records (never the root logger's) to stderr.

    Args:
        level: Level name or number; defaults to $GAIDVIZ_LOG_LEVEL or INFO.
        fmt: Record format; defaults to DEFAULT_FMT.
        datefmt: Timestamp format; defaults to DEFAULT_DATEFMT.
        force: Drop every existing handler first. Without it a second call
            only updates the level.
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(resolved)

    if force:
        for h in list(logger.handlers):
            h.close()
            logger.removeHandler(h)
    elif _stderr_handlers(logger):
        return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolved)
    console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for name, or the gaidviz package logger when name is None."""
    return logging.getLogger(name or ROOT_LOGGER_NAME)
