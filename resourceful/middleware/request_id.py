"""
Resourceful — Request ID Middleware
====================================

What:  Gives every request a correlation ID that ties the access log line,
       the Error Translator's log line and the client's view of a failure
       together.
How:   A client-supplied X-Request-ID is reused when it is a short token of
       safe characters; anything else (missing, too long, spaces, control
       characters) is replaced by a generated 12-hex-digit ID so a client can
       never inject text into server logs. The ID lives in a ContextVar for
       the duration of the request and is echoed in the response header.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_ACCEPTED_ID = re.compile(r"[A-Za-z0-9._:-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def current_request_id() -> str:
    """ID of the request being handled, "" outside a request."""
    return request_id_var.get()


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def accept_request_id(candidate: Optional[str]) -> str:
    """The client's ID if it is safe to log verbatim, else a fresh one."""
    if candidate and _ACCEPTED_ID.fullmatch(candidate):
        return candidate
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid

        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
