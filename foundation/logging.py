import logging
import sys
from typing import Any, Awaitable, Callable
from uuid import uuid4

import structlog
from structlog import contextvars
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from foundation.config import get_log_level

_configured = False


def configure_logging() -> None:
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=get_log_level(),
        handlers=[logging.StreamHandler(sys.stdout)],
        format="%(message)s",
    )
    structlog.configure(
        processors=[
            contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True


def bind_log_context(**params: Any) -> None:
    payload = {key: str(value) for key, value in params.items() if value is not None}
    if payload:
        contextvars.bind_contextvars(**payload)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid4()))

        contextvars.clear_contextvars()
        bind_log_context(request_id=request_id, path=str(request.url.path))

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def get_logger(name: str = None, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    if name is not None:
        return structlog.get_logger(name, **initial_values)
    return structlog.get_logger(**initial_values)


__all__ = [
    "RequestIdMiddleware",
    "bind_log_context",
    "configure_logging",
    "get_logger",
]
