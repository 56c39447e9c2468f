"""Logging setup for docmeta.

Every component logs through a child of the ``docmeta`` logger named after
its subsystem (``docmeta.reader``, ``docmeta.scanner``, ...). Console output
tags each line with that subsystem so that per-module load failures can be
told apart from scanner and type-checker messages::

    [docmeta] WARNING reader: Could not generate Python documentation for ...
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "docmeta"

CONSOLE_FORMAT = "[docmeta] %(levelname)s %(subsystem)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(subsystem)s: %(message)s"


class SubsystemFilter(logging.Filter):
    """Expose the last component of the logger name as ``record.subsystem``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(f"{_LOGGER_NAME}."):
            record.subsystem = record.name[len(_LOGGER_NAME) + 1 :]
        else:
            record.subsystem = record.name
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the logger for a docmeta subsystem."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send docmeta records to stderr and, when given, to ``log_file``.

    The file sink always records DEBUG so that a failed extraction can be
    inspected after a quiet console run.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False

    # configure_logging may run once per CLI invocation in the same process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(SubsystemFilter())
    stream_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(SubsystemFilter())
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if log_file is not None else level)
    return logger


__all__ = ["SubsystemFilter", "configure_logging", "get_logger"]
