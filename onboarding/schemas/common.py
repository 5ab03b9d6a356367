"""
Common schema types used across the API.
"""

from typing import List, Optional

from pydantic import BaseModel


class FieldError(BaseModel):
    """A single request validation problem."""

    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: Optional[str] = None
    errors: Optional[List[FieldError]] = None
    request_id: Optional[str] = None


class MessageResponse(BaseModel):
    """Confirmation message for a completed workflow step."""

    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
