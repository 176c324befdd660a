"""
Resourceful — Error Translator
===============================

What:  Turns any exception raised while handling a resource request into the
       HTTP response and the server log line for it.
Why:   Handlers, codecs, data sources and controllers only raise. This module
       is the one place that decides what the client sees.

Translation rules:
    HTTPError with sub-errors  → its status, application/json {"errors": [...]}
    HTTPError without          → its status, text/plain message
    anything else              → 500, empty body (internals never leak)

Every translated error is logged, whatever the client receives:
    5xx → ERROR (unclassified errors include the traceback)
    4xx → WARNING
"""

import json
import logging

from starlette.responses import PlainTextResponse, Response

from resourceful.exceptions import HTTPError
from resourceful.middleware.request_id import current_request_id
from resourceful.schemas import ErrorDocument

logger = logging.getLogger(__name__)


def render_http_error(exc: HTTPError) -> Response:
    """Response body for a classified error."""
    if exc.errors:
        document = ErrorDocument(errors=exc.errors)
        body = json.dumps(document.model_dump(mode="json", exclude_none=True))
        return Response(
            content=body.encode("utf-8"),
            status_code=exc.status_code,
            media_type="application/json",
        )
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def translate_error(exc: BaseException) -> Response:
    """Log `exc` and build the response for it."""
    rid = current_request_id()

    if isinstance(exc, HTTPError):
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(
            level,
            "[%s] %s %d: %s | Context: %s",
            rid,
            type(exc).__name__,
            exc.status_code,
            exc.message,
            exc.context,
        )
        return render_http_error(exc)

    logger.error(
        "[%s] Unexpected error: %s",
        rid,
        str(exc),
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return Response(status_code=500)
