"""
Shared error handling for the Registration Service.
"""

from enum import Enum
from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorKind(str, Enum):
    """Discriminant for the registry error taxonomy."""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    STORE = "store"


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class RegistryException(Exception):
    """Base exception for Registration Service components."""

    kind: Optional[ErrorKind] = None
    status_code: int = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(RegistryException):
    """Business-rule violations detected before any store access."""

    kind = ErrorKind.VALIDATION
    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class ConflictError(RegistryException):
    """A record with the same unique key already exists."""

    kind = ErrorKind.CONFLICT
    status_code = 409

    def __init__(self, message: str = "Resource already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFLICT_ERROR", message, details)


class StoreError(RegistryException):
    """Persistence failures other than conflicts (connectivity, I/O)."""

    kind = ErrorKind.STORE
    status_code = 500

    def __init__(self, message: str = "Store error", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_ERROR", message, details)
