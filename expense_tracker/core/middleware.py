"""Request-scoped context: a request id shared with every log line."""
from __future__ import annotations

import contextvars
import logging
import secrets
import time
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

REQUEST_ID_HEADER = "X-Request-ID"

_request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("_request_id_ctx", default="-")

logger = logging.getLogger("expense_tracker.access")


class RequestIdFilter(logging.Filter):
    """Stamp ``record.request_id`` so formatters can print it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_ctx.get()
        return True


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the duration of a request and log one access line.

    Health checks are served but not logged.
    """

    def __init__(self, app: ASGIApp, quiet_paths: tuple[str, ...] = ("/api/health",)) -> None:
        super().__init__(app)
        self.quiet_paths = quiet_paths

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or secrets.token_hex(8)
        token = _request_id_ctx.set(request_id)
        request.state.request_id = request_id
        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            response.headers.setdefault(REQUEST_ID_HEADER, request_id)
            if request.url.path not in self.quiet_paths:
                logger.info(
                    "%s %s -> %d (%.1fms)",
                    request.method,
                    request.url.path,
                    response.status_code,
                    elapsed_ms,
                )
            return response
        finally:
            _request_id_ctx.reset(token)


__all__ = ["RequestContextMiddleware", "RequestIdFilter"]
