"""Central logging configuration using a Loguru JSON sink."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from loguru import logger as loguru_logger


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to Loguru, keeping the originating logger name."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        loguru_logger.bind(logger_name=record.name).opt(exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_json_logging(level: str | int = "INFO", sink: TextIO | None = None) -> None:
    """Route the harness's stdlib logging through a serialized Loguru sink.

    *level* is a level name or a numeric stdlib level.
    """
    if isinstance(level, int):
        sink_level: str | int = level
        stdlib_level = level
    else:
        sink_level = level.upper()
        stdlib_level = getattr(logging, sink_level, logging.INFO)

    loguru_logger.remove()
    loguru_logger.add(
        sink if sink is not None else sys.stderr,
        level=sink_level,
        serialize=True,
        enqueue=False,
        backtrace=False,
        diagnose=False,
    )
    logging.basicConfig(
        handlers=[InterceptHandler()],
        level=stdlib_level,
        force=True,
    )
