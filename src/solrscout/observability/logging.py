"""Structured logging configuration using structlog.

The engines, registry and builder log through ``logging.getLogger(__name__)``.
``setup_logging`` installs a handler on the ``solrscout`` logger whose
formatter runs those standard-library records through the same structlog
processor chain as native structlog loggers, so both come out as JSON lines
or as console output depending on ``log_format``.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from solrscout.config.settings import ObservabilitySettings

PACKAGE_LOGGER = "solrscout"


def setup_logging(settings: ObservabilitySettings | None = None, stream: IO[str] | None = None) -> None:
    """Configure structured logging for solr-scout.

    Calling it again replaces the previously installed handler.

    Args:
        settings: Observability settings. Uses defaults if None.
        stream: Where log lines are written. Defaults to stderr.
    """
    log_level = settings.log_level.upper() if settings else "INFO"
    log_format = settings.log_format if settings else "json"

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderers: list
    if log_format == "console":
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]
    else:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, log_level, logging.INFO))
    logger.propagate = False
