"""
Resourceful — CRUD Resources over HTTP
=======================================

What: Serve create/read/update/delete endpoints for pydantic record types
      backed by pluggable data sources, with optional per-resource hooks.

Architecture:

    ┌─────────────────────────────────────┐
    │  API (registry)  →  FastAPI router  │  ← routing decisions, built once
    ├─────────────────────────────────────┤
    │  ResourceHandler (dispatch)         │  ← one fixed sequence per verb
    ├──────────────┬──────────────────────┤
    │ DocumentCodec│  Controller hooks    │  ← wire ↔ record, interception
    ├──────────────┴──────────────────────┤
    │  DataSource (application-supplied)  │  ← persistence
    └─────────────────────────────────────┘
          Error Translator: any failure → status + body + log line
"""

__version__ = "1.0.0"

from resourceful.api import API  # noqa: E402
from resourceful.exceptions import (  # noqa: E402
    BadRequestError,
    CardinalityError,
    ConflictError,
    DatabaseError,
    DecodeError,
    ForbiddenError,
    HTTPError,
    IDMismatchError,
    InvalidIDError,
    MalformedBodyError,
    NotFoundError,
    ResourceConfigurationError,
)
from resourceful.resource import Controller, DataSource, RequestContext, Resource  # noqa: E402

__all__ = [
    "API",
    "BadRequestError",
    "CardinalityError",
    "ConflictError",
    "Controller",
    "DataSource",
    "DatabaseError",
    "DecodeError",
    "ForbiddenError",
    "HTTPError",
    "IDMismatchError",
    "InvalidIDError",
    "MalformedBodyError",
    "NotFoundError",
    "RequestContext",
    "Resource",
    "ResourceConfigurationError",
    "__version__",
]
