"""Logging setup shared by the CLI and the ingestion stages."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_ROOT_LOGGER = "repowiki"

CONSOLE_FORMAT = "[repowiki] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the logger for one ingestion stage, e.g. ``get_logger("selector")``."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}" if name else _ROOT_LOGGER)


def _with_format(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send stage progress to stderr and, if ``log_file`` is set, a full trace to disk.

    The console shows info records unless ``verbose`` is set. The file sink
    always records debug detail, so a failed run can be inspected afterwards
    without re-running it verbosely. Calling this again replaces the handlers
    installed by an earlier call.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # stdout carries the rendered document.
    logger.addHandler(
        _with_format(logging.StreamHandler(sys.stderr), console_level, CONSOLE_FORMAT)
    )
    logger.setLevel(console_level)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(
            _with_format(
                logging.FileHandler(log_file, encoding="utf-8"), logging.DEBUG, FILE_FORMAT
            )
        )
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["CONSOLE_FORMAT", "FILE_FORMAT", "configure_logging", "get_logger"]
