"""
Resourceful — Middleware
=========================

Cross-cutting concerns installed by the application factory.

Middleware Chain:
    Request → [Request ID] → [Access Log] → Router → Resource handler

    Request ID runs first so the access log line and every error logged by
    the Error Translator carry the same correlation ID.
"""

from resourceful.middleware.logging import RequestLoggingMiddleware
from resourceful.middleware.request_id import RequestIDMiddleware, current_request_id, request_id_var

__all__ = ["RequestIDMiddleware", "RequestLoggingMiddleware", "current_request_id", "request_id_var"]
