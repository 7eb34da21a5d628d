"""
structlog setup for tinymedia.

Module loggers wrap stdlib loggers, so until ``configure_logging`` runs only
warnings and errors reach stderr (through stdlib's last-resort handler) and
debug events stay silent.
"""

from __future__ import annotations

import logging
import sys
from typing import cast

import structlog
from structlog.stdlib import BoundLogger
from structlog.typing import Processor

SERVICE_NAME = "tinymedia"


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    try:
        return logging.getLevelNamesMapping()[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


def configure_logging(level: str | int = "WARNING", json_output: bool = False) -> None:
    """
    Route structlog through stdlib logging and render to stderr.

    stdout is left to command output (extracted metadata).

    Raises:
        ValueError: If level is not a known level name
    """
    numeric_level = _level_number(level)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    logging.basicConfig(level=numeric_level, handlers=[handler], force=True)
    logging.captureWarnings(True)


def get_logger(name: str) -> BoundLogger:
    """Lazy structlog logger on top of the stdlib logger called name."""
    return cast(
        BoundLogger,
        structlog.wrap_logger(logging.getLogger(name), service_name=SERVICE_NAME),
    )
