"""
Resourceful — Wire Schemas
===========================

What:  Pydantic models for the parts of the wire format the library owns
       itself: error objects and the health response.
Why:   Record documents are shaped by each resource's own record type; errors
       and health output must look the same for every resource.

Error document example:
    {
        "errors": [
            {
                "status": "400",
                "code": "decode_error",
                "title": "Invalid field value",
                "detail": "Input should be a valid integer",
                "source": {"pointer": "/data/viewCount"}
            }
        ]
    }
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorObject(BaseModel):
    """
    One structured sub-error inside an error document.

    All fields are optional; unset fields are omitted from the wire output.
    `status` is a string, matching the JSON:API error object convention.
    """
    id: Optional[str] = Field(default=None, description="Unique identifier for this occurrence")
    href: Optional[str] = Field(default=None, description="Link with further details")
    status: Optional[str] = Field(default=None, description="HTTP status code as a string")
    code: Optional[str] = Field(default=None, description="Machine-readable error code")
    title: Optional[str] = Field(default=None, description="Short summary of the problem")
    detail: Optional[str] = Field(default=None, description="Explanation of this occurrence")
    source: Optional[Dict[str, str]] = Field(
        default=None,
        description="Reference to the offending part of the request, e.g. {'pointer': '/data/title'}",
    )
    meta: Optional[Dict[str, Any]] = Field(default=None, description="Non-standard extra information")


class ErrorDocument(BaseModel):
    """Top-level error body: an ordered list of error objects."""
    errors: List[ErrorObject]


class HealthResponse(BaseModel):
    """
    What:  Health check response for monitoring and load balancer probes.
    Who:   Returned by GET /health.
    """
    status: str = Field(description="Overall service status")
    version: str = Field(description="Library version")
    resources: List[str] = Field(description="Registered resource names")
    uptime_seconds: float = Field(description="Seconds since the application started")
