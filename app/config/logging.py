"""
Structured logging for the FHIR query gateway.

Every event goes through structlog and ends up on stdout, either as a JSON
line or as console output. Events emitted while a request is being served
carry the request's correlation ID, so a gateway call and the remote FHIR
query it caused can be matched up in the logs.
"""

import logging
import sys
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from typing import Any

import structlog

REQUEST_ID_LENGTH = 8

# Held at WARNING; the client loggers open up when remote exchanges are logged
CLIENT_LOGGERS = ("fhirpy", "aiohttp", "asyncio")
SERVER_LOGGERS = ("uvicorn.access",)

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Correlation ID of the request being served, or "" outside a request."""
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """Bind a correlation ID to the current context, generating one if none is given."""
    new_id = request_id or uuid.uuid4().hex[:REQUEST_ID_LENGTH]
    request_id_var.set(new_id)
    return new_id


def add_request_id(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def _event_processors() -> list[Callable]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_request_id,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderers(json_format: bool) -> list[Callable]:
    if not json_format:
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def _set_level(logger_names: tuple[str, ...], level: int) -> None:
    for name in logger_names:
        logging.getLogger(name).setLevel(level)


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    quiet_client: bool = True,
) -> None:
    """
    Route structlog and standard library logging to stdout.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: Emit JSON lines when True, console output otherwise
        quiet_client: Keep fhirpy/aiohttp at WARNING; pass False to see remote exchanges
    """
    structlog.configure(
        processors=_event_processors() + _renderers(json_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    _set_level(SERVER_LOGGERS, logging.WARNING)
    _set_level(CLIENT_LOGGERS, logging.WARNING if quiet_client else logging.NOTSET)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, usually named after the calling module."""
    return structlog.get_logger(name)
