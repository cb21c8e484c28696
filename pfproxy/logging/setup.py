"""Structlog configuration for pfproxy."""

import logging
import sys

import structlog

from pfproxy.config import ServiceConfig, LogFormat

# Per-request chatter from these drowns out resolver events below DEBUG
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def _add_service(logger, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", "pfproxy")
    return event_dict


def configure_logging(config: ServiceConfig | None = None) -> None:
    """
    Configure structlog and the stdlib loggers used by uvicorn and httpx.

    Args:
        config: ServiceConfig instance, uses defaults if None
    """
    if config is None:
        config = ServiceConfig()

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.log_format == LogFormat.JSON:
        processors.extend([
            _add_service,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.extend([
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a lazily configured structlog logger, tagged with ``logger_name``."""
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()
