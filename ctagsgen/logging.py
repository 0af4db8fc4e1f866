"""Logging utilities for ctagsgen commands.

Records logged with ``extra={"stage": ...}`` are tagged with the pipeline stage
(``resolve``, ``clear``, ``extract`` or ``run``) so a failing run shows where it
stopped without needing ``--verbose``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

_LOGGER_NAME = "ctagsgen"
CONSOLE_FORMAT = "[ctagsgen] %(levelname)s %(stage_tag)s%(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(stage_tag)s%(message)s"


class StageFormatter(logging.Formatter):
    """Formatter that renders the optional ``stage`` attribute as ``[stage] ``."""

    def format(self, record: logging.LogRecord) -> str:
        stage = getattr(record, "stage", None)
        record.stage_tag = f"[{stage}] " if stage else ""
        return super().format(record)


def stage(name: str) -> Dict[str, str]:
    """Return the ``extra`` mapping that tags a record with ``name``."""
    return {"stage": name}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the ctagsgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach a console handler and, when ``log_file`` is set, a debug-level file sink.

    Calling it again replaces the handlers installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(StageFormatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(StageFormatter(FILE_FORMAT))
        logger.addHandler(sink)

    return logger


__all__ = ["StageFormatter", "configure_logging", "get_logger", "stage"]
