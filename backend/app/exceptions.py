"""
Contacts API - Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions, one per error kind the API reports.
How:   Each exception carries an ErrorKind, a client-facing message and an
       optional context dict. Global exception handlers (registered in
       main.py) catch these and return structured JSON error responses with
       the status code for their kind.
Who:   Raised by the repository and service layers; caught by global handlers.

Exception Hierarchy:
    ContactsAPIError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    ├── ConflictError     → 409 Conflict (uniqueness violation)
    └── InternalError     → 500 Internal Server Error (store or unexpected failure)
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Machine-readable error codes; the value is returned as the `error` field."""

    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class ContactsAPIError(Exception):
    """
    Base exception for all Contacts API errors.

    Attributes:
        kind:     ErrorKind deciding the HTTP status and `error` code
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged, NOT returned to the client)
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code


class ValidationError(ContactsAPIError):
    """
    Raised when client input fails validation.

    When:    Missing or blank name, malformed body, oversize field.
    HTTP:    400 Bad Request. Raised before any store access.

    Example response:
        {
            "error": "validation_error",
            "message": "Name is required",
            "request_id": "a1b2c3d4"
        }
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ContactsAPIError):
    """
    Raised when a requested contact does not exist.

    When:    GET/PUT/DELETE /api/contacts/{id} with an id that has no row.
    HTTP:    404 Not Found

    The message stays generic ("Contact not found"); the id goes into the
    context for the server log.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "Contact",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=f"{resource} not found", context=ctx)


class ConflictError(ContactsAPIError):
    """
    Raised when the store rejects a write because of a uniqueness constraint.

    When:    Creating or updating a contact with an email another row uses.
    HTTP:    409 Conflict

    Concurrent writers racing on the same email are serialized by the store's
    unique index: one commits, the other ends up here.
    """

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        field: str = "email",
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["field"] = field
        super().__init__(
            message=message or f"{field.capitalize()} already exists",
            context=ctx,
        )
        self.field = field


class InternalError(ContactsAPIError):
    """
    Raised when a store operation fails for any reason other than a conflict.

    When:    Connection refused or lost, malformed query, driver failure.
    HTTP:    500 Internal Server Error

    The underlying driver message is passed through to the client as-is.
    """

    kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
