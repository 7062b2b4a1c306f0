"""Structured logging configuration using structlog.

JSON lines in production, colored console output in development. Stdlib
loggers (uvicorn, redis, httpx) are routed through the same renderer.

API keys must never reach a log line in full: call sites pass keys through
mask_credential, and the redact_credentials processor masks the known key
fields as a second line.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Event fields that may carry a raw API key
_CREDENTIAL_FIELDS = ("api_key",)

# httpx logs request URLs at INFO, and Gemini URLs carry the key
_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def mask_credential(credential: str | None) -> str:
    """Return a log-safe form of an API key (first 4 and last 2 chars)."""
    if not credential:
        return "<none>"
    if len(credential) <= 8:
        return "***"
    return f"{credential[:4]}...{credential[-2:]}"


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict["app"] = "gemini-gateway"
    return event_dict


def redact_credentials(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask raw key fields that slipped into an event."""
    for field in _CREDENTIAL_FIELDS:
        value = event_dict.get(field)
        if isinstance(value, str):
            event_dict[field] = mask_credential(value)
    return event_dict


def _renderer(is_production: bool) -> Processor:
    if is_production:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: "production" selects JSON output, anything else console
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    is_production = environment.lower() == "production"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
        redact_credentials,
    ]
    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(is_production),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if is_production else "console",
    )
