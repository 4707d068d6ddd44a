"""
Structured logging configuration using structlog.

Events below ``LOG_LEVEL`` are dropped before any processing. Every event
carries the service name and version so that log lines from the notification
receiver and the EDC provisioning tool can be told apart once aggregated.
Development gets a console renderer; staging and production emit JSON.
"""

import logging
import sys
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from cx_traceability.core.config import Settings, get_settings

# Library loggers that repeat what the application already logs per request
QUIET_LOGGERS = ("httpx", "httpcore")


def _service_context(settings: Settings) -> Processor:
    service = settings.project_name
    version = settings.version
    environment = settings.environment

    def add_service_context(
        _logger: WrappedLogger, _method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("service", service)
        event_dict.setdefault("version", version)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_service_context


def build_processors(settings: Settings) -> list[Processor]:
    """Processor chain for ``settings.environment``, ending in a renderer."""
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _service_context(settings),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.environment == "development":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    else:
        processors.extend(
            [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        )
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        settings: Settings to configure from; the cached application settings
            when omitted.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    library_level = level if level == logging.DEBUG else max(level, logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, optionally bound to ``initial_values``."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name, **initial_values))
