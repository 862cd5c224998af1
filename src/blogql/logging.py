"""
structlog setup shared by the API server, the CLIs and the migrations.

Every event logged while a request is being served carries that request's id
and, for GraphQL requests, the operation name. Both live in context
variables bound by `request_context()`.
"""

import base64
import logging
import secrets
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
operation_ctx: ContextVar[str | None] = ContextVar("graphql_operation", default=None)


def add_request_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor copying the bound request context into the event."""
    _ = logger, method_name

    request_id = request_id_ctx.get()
    if request_id:
        event_dict["request_id"] = request_id

    operation = operation_ctx.get()
    if operation:
        # An operation passed to the log call itself wins
        event_dict.setdefault("graphql_operation", operation)

    return event_dict


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Route structlog through stdlib logging on stdout.

    Args:
        debug: Render coloured console lines instead of JSON. Also lowers the
            default level to DEBUG.
        level: Level name such as "info" or "WARNING"; overrides the default
            picked from `debug`.
    """
    if level:
        log_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    else:
        log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s", force=True)

    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_request_context,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """14-character urlsafe id: microsecond timestamp followed by 2 random bytes."""
    stamp = (time.time_ns() // 1000).to_bytes(8, byteorder="big")
    return base64.urlsafe_b64encode(stamp + secrets.token_bytes(2)).decode("ascii").rstrip("=")


@contextmanager
def request_context(request_id: str | None = None, operation: str | None = None) -> Iterator[str]:
    """Bind a request id (generated when missing) and operation name for the block.

    Yields the request id in effect. The previous values are restored on exit.
    """
    request_id = request_id or generate_request_id()
    id_token = request_id_ctx.set(request_id)
    operation_token = operation_ctx.set(operation)
    try:
        yield request_id
    finally:
        request_id_ctx.reset(id_token)
        operation_ctx.reset(operation_token)
