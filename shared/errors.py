"""
Shared error handling for the Books Service.
"""

from typing import Dict, Any, Optional

from opentelemetry import trace
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AccessLayerException(Exception):
    """Base exception for service errors."""

    http_status = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(AccessLayerException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class EntityNotFoundError(AccessLayerException):
    """The requested entity does not exist in the backing store."""

    http_status = 404

    def __init__(self, entity_id: int, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        self.entity_id = entity_id
        super().__init__("NOT_FOUND", message, {"id": entity_id, **(details or {})})


class StoreUnavailableError(AccessLayerException):
    """The backing store could not be reached or the transaction failed."""

    http_status = 503

    def __init__(self, message: str = "Backing store unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_UNAVAILABLE", message, details)


class CacheUnavailableError(AccessLayerException):
    """Cache transport failure. Absorbed by callers, never returned to clients."""

    http_status = 503

    def __init__(self, message: str = "Cache unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_UNAVAILABLE", message, details)
