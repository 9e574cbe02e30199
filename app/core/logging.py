"""Structured logging configuration."""

import logging
import sys
from typing import Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper, add_log_level
from structlog.stdlib import add_logger_name

from app.core.config import settings

# Libraries that log every statement or request at INFO
NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


def _renderer(log_format: str):
    if log_format == "json":
        return JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None):
    """Configure structlog on top of stdlib logging.

    Every event carries the service name and environment. Level and format
    default to LOG_LEVEL and LOG_FORMAT from settings.
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_format = log_format or settings.LOG_FORMAT

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            add_log_level,
            add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            TimeStamper(fmt="iso", utc=True),
            structlog.processors.dict_tracebacks,
            _renderer(log_format),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level),
    )

    if level != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.bind_contextvars(
        service=settings.SERVICE_NAME,
        environment=settings.ENVIRONMENT,
    )
