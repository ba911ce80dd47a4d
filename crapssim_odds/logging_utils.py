from __future__ import annotations

import logging
import sys
from typing import List

# Every module logger lives under "CSO." except the CLI's own.
PACKAGE_LOGGERS = ("CSO", "crapssim-odds")

_HANDLER_MARK = "_crapssim_odds_handler"
_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def level_for_verbosity(verbose_count: int) -> int:
    """
    Map the -v count onto what the package actually emits:

    default → WARNING  (missing CSV label, deprecated config keys, CLI failures)
    -v      → INFO     (script loaded, batch start/finish, one line per trial, CSV rows appended)
    -vv     → DEBUG    (every roll with its wager events and the state after it)
    """
    if verbose_count <= 0:
        return logging.WARNING
    if verbose_count == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbose_count: int = 0) -> List[logging.Logger]:
    """
    Attach one stderr handler to each package logger and set its level.

    Loggers from other libraries and the root logger are left alone. Records
    still propagate, so an application that configures the root sees them too.
    Calling again only changes the level.
    """
    level = level_for_verbosity(verbose_count)
    configured = []
    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if not any(getattr(h, _HANDLER_MARK, False) for h in logger.handlers):
            handler = logging.StreamHandler(stream=sys.stderr)
            setattr(handler, _HANDLER_MARK, True)
            handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%H:%M:%S"))
            logger.addHandler(handler)
        configured.append(logger)
    return configured


def reset_logging() -> None:
    """Remove the handlers setup_logging() added and restore inherited levels."""
    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        for h in list(logger.handlers):
            if getattr(h, _HANDLER_MARK, False):
                logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)
