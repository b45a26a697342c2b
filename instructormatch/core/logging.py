from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from instructormatch.core.config import get_settings

_CONFIGURED = False


def setup_logging(level: int | str | None = None) -> None:
    """Configure structlog with contextvars support.

    JSON lines everywhere except the ``local`` environment, which gets the
    console renderer for readable development output.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = get_settings()
    if level is None:
        level = settings.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
    ]
    if settings.environment == "local":
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    else:
        processors.extend(
            [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
        )

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True
