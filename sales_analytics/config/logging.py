"""
Logging Configuration for the Sales Analytics Report Engine

Structured logging through structlog on top of the stdlib root logger, so
log lines from polars, prefect and the engine share one format.
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import add_log_level, ProcessorFormatter

from sales_analytics.config.settings import get_settings


def _renderer(log_format: str):
    if log_format == "json":
        return JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure structured logging for report runs.

    Arguments override the monitoring settings.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR
        log_format: json or text
        log_file: Extra JSON log file
    """
    settings = get_settings()
    level = (log_level or settings.monitoring.log_level).upper()
    log_format = log_format or settings.monitoring.log_format
    log_file = log_file or settings.monitoring.log_file

    numeric_level = getattr(logging, level, logging.INFO)

    shared_processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(ProcessorFormatter(
        processor=_renderer(log_format),
        foreign_pre_chain=shared_processors,
    ))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(ProcessorFormatter(
            processor=JSONRenderer(),
            foreign_pre_chain=shared_processors,
        ))
        root_logger.addHandler(file_handler)

    get_logger(__name__).info(
        "Logging configured",
        level=level,
        format=log_format,
        log_file=log_file,
        environment=settings.app_env,
    )


def get_logger(name: str, **context: Any):
    """Get a logger, optionally bound to key/value context (e.g. report=...)"""
    logger = structlog.get_logger(name)
    if context:
        return logger.bind(**context)
    return logger
