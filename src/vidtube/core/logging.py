"""Structured logging with correlation IDs and credential redaction.

structlog renders one event per line: JSON in production, coloured console
output in development. Every event carries the logger name, an ISO
timestamp and the request's correlation ID. Values of credential-bearing
keys (passwords, tokens, secrets) are masked before rendering.
"""

import logging
import sys
import uuid
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from vidtube.core.config import Settings, get_settings

REDACTED = "[redacted]"

_SENSITIVE_KEYS = frozenset(
    {
        "password",
        "old_password",
        "new_password",
        "password_hash",
        "token",
        "access_token",
        "refresh_token",
        "refresh_token_hash",
        "authorization",
        "secret",
    }
)


def new_correlation_id() -> str:
    """Generate a short correlation ID."""
    return f"cid_{uuid.uuid4().hex[:12]}"


def redact_credentials(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask the value of any key that names a credential.

    Args:
        logger: Wrapped logger (unused).
        method_name: Log method name (unused).
        event_dict: Event dictionary to modify.

    Returns:
        EventDict: The event with sensitive values replaced.
    """
    for key in event_dict.keys() & _SENSITIVE_KEYS:
        if event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Move the name bound by ``get_logger`` to the ``logger`` key."""
    event_dict["logger"] = event_dict.pop("logger_name", "vidtube")
    return event_dict


def ensure_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Give events logged outside a request their own correlation ID."""
    event_dict.setdefault("correlation_id", new_correlation_id())
    return event_dict


def event_to_message(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Emit the log text under ``message`` instead of structlog's ``event``."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def _renderer(settings: Settings) -> list[Processor]:
    if settings.is_development or settings.log_format == "console":
        return [
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        ]
    return [
        structlog.processors.format_exc_info,
        event_to_message,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Safe to call more than once; the last call wins.

    Args:
        settings: Settings to read the level and format from. Loaded from
            the environment when omitted.
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        ensure_correlation_id,
        redact_credentials,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderer(settings),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )

    # uvicorn and SQLAlchemy log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a logger whose events carry ``logger=<name>``."""
    return structlog.get_logger(logger_name=name or "vidtube")


def bind_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current request's logging context.

    Called by the request middleware with the ID from the
    ``X-Correlation-ID`` header or a freshly generated one.
    """
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    """Drop everything bound to the current logging context."""
    structlog.contextvars.clear_contextvars()
