"""
Resourceful — Access Log Middleware
====================================

What:  One line per request naming the resource operation that served it:

           GET /v1/posts/1,2 → posts.read 200 (1.4ms) [3f9c2a71b0de]
           PATCH /v1/posts/1 → - 405 (0.3ms) [9a0e11c4d2f8]

How:   ResourceHandler.dispatch records the resource name and operation on
       request.state; this middleware reads them back after the response.
       Requests that never reached a resource handler are shown as "-".

Levels:
    5xx                              → ERROR
    4xx from a resource operation    → INFO (the Error Translator already
                                        logged it with its context)
    4xx before any handler ran       → WARNING (unknown path, bad method)
    anything else                    → INFO

Request bodies are never logged; records may contain personal data.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from resourceful.middleware.request_id import current_request_id

logger = logging.getLogger("resourceful.access")

UNROUTED = "-"


def served_by(request: Request) -> Optional[str]:
    """Operation label such as "posts.read"; None when no resource handler ran."""
    resource = getattr(request.state, "resource", None)
    operation = getattr(request.state, "operation", None)
    if resource is None or operation is None:
        return None
    return f"{resource}.{operation}"


def access_level(status: int, handled: bool) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400 and not handled:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log keyed by resource operation."""

    # Probes hit these every few seconds
    QUIET_PATHS = frozenset({"/health"})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        target = served_by(request)
        logger.log(
            access_level(response.status_code, handled=target is not None),
            "%s %s → %s %d (%.1fms) [%s]",
            request.method,
            request.url.path,
            target or UNROUTED,
            response.status_code,
            elapsed_ms,
            current_request_id(),
            extra={
                "resource": getattr(request.state, "resource", None),
                "operation": getattr(request.state, "operation", None),
                "status": response.status_code,
                "duration_ms": elapsed_ms,
            },
        )
        return response
