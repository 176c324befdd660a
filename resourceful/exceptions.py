"""
Resourceful — Exception Hierarchy
==================================

What:  Errors raised by the dispatch engine and by collaborators (data
       sources, controllers) to signal a specific HTTP outcome.
Why:   A single tagged error type lets the Error Translator turn any failure
       into a status code, a body and a log line in one place.
How:   HTTPError carries a status code, a message and an optional ordered list
       of structured sub-errors. Subclasses fix the status code for the common
       cases. Anything that is not an HTTPError is treated as an internal
       failure (500, no detail).

Exception Hierarchy:
    ResourceConfigurationError (TypeError)  → programmer error at registration
    HTTPError (base)
    ├── BadRequestError          → 400
    │   ├── MalformedBodyError   → 400 body is not a JSON object
    │   ├── CardinalityError     → 400 expected exactly one object
    │   ├── InvalidIDError       → 400 unusable id in the path
    │   ├── IDMismatchError      → 400 body id differs from the path id
    │   └── DecodeError          → 400 field value has the wrong type
    ├── ForbiddenError           → 403
    ├── NotFoundError            → 404
    ├── ConflictError            → 409
    └── DatabaseError            → 500 backing store failure

Data sources and controllers are expected to raise these (or their own
HTTPError instances) so clients get a meaningful status. Unclassified
exceptions still work; they just become an opaque 500.
"""

from typing import Any, Dict, List, Optional, Sequence

from resourceful.schemas import ErrorObject


class ResourceConfigurationError(TypeError):
    """
    Raised when a resource is registered with an unusable configuration.

    What:    Wrong prototype kind, duplicate resource name, colliding wire
             field names, registration after the router was built.
    When:    At startup, inside API.add_resource().
    Why not an HTTPError: this is a programmer error. It must stop the process
             during setup and is never translated into a response.
    """


class HTTPError(Exception):
    """
    Base for every error that maps onto a specific HTTP response.

    Attributes:
        status_code: HTTP status to send
        message:     Plain-text message (sent when there are no sub-errors)
        errors:      Ordered structured sub-errors (sent as JSON when present)
        context:     Debug info for the server log, never sent to the client
    """

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        errors: Optional[Sequence[ErrorObject]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.errors: List[ErrorObject] = list(errors or [])
        self.context = context or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class BadRequestError(HTTPError):
    """The client sent something the engine cannot use."""

    status_code = 400
    default_message = "Bad request"


class MalformedBodyError(BadRequestError):
    """Request body is not valid JSON, or not a JSON object."""

    default_message = "Request body must be a JSON object"


class CardinalityError(BadRequestError):
    """
    Create and update accept exactly one object.

    Raised when the decoded document describes zero records or several.
    """

    default_message = "expected exactly one object"

    def __init__(self, count: int, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["count"] = count
        super().__init__(
            message=f"expected exactly one object, got {count}",
            context=ctx,
        )
        self.count = count


class InvalidIDError(BadRequestError):
    """An id in the path is empty or cannot be converted to the key type."""

    default_message = "Invalid resource id"

    def __init__(self, resource_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["resource_id"] = resource_id
        super().__init__(message=f"Invalid resource id '{resource_id}'", context=ctx)
        self.resource_id = resource_id


class IDMismatchError(BadRequestError):
    """
    An update body names a different id than the record addressed by the path.

    Carries one ErrorObject pointing at the id member of the body.
    """

    default_message = "Record id cannot be changed"

    def __init__(
        self,
        expected: str,
        received: str,
        pointer: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update(expected=expected, received=received)
        detail = f"Body id '{received}' does not match the path id '{expected}'"
        super().__init__(
            message=detail,
            errors=[
                ErrorObject(
                    status="400",
                    code="id_mismatch",
                    title=self.default_message,
                    detail=detail,
                    source={"pointer": pointer},
                )
            ],
            context=ctx,
        )
        self.expected = expected
        self.received = received


class DecodeError(BadRequestError):
    """
    A wire value cannot be converted to the declared type of its field.

    `field` is the wire name of the first offending field; `errors` holds one
    ErrorObject per problem, each with a JSON pointer to the field.
    """

    default_message = "Invalid field value"

    def __init__(
        self,
        field: str,
        detail: str,
        errors: Optional[Sequence[ErrorObject]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["field"] = field
        super().__init__(
            message=f"Invalid value for field '{field}': {detail}",
            errors=errors,
            context=ctx,
        )
        self.field = field


class ForbiddenError(HTTPError):
    """Typical controller veto: the caller may not perform this operation."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(HTTPError):
    """The requested record does not exist."""

    status_code = 404
    default_message = "Not found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(HTTPError):
    """The write would violate a uniqueness or integrity constraint."""

    status_code = 409
    default_message = "Conflict"


class DatabaseError(HTTPError):
    """
    The backing store failed.

    The message sent to the client is always generic; store details belong in
    `context`, which is only logged.
    """

    status_code = 500
    default_message = "A database error occurred. Please try again later."
