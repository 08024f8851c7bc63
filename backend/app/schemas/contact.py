"""
Contacts API - Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate the OpenAPI documentation.

Request models keep every field optional at the schema level. The "name is
required" rule is a business rule enforced by ContactService so that it is
reported as a 400 with a specific message, and so that the update model can
tell "field absent" apart from "field sent as null".
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.models.contact import (
    COMPANY_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    MUTABLE_FIELDS,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ContactCreate(BaseModel):
    """Body of POST /api/contacts. Unknown keys are ignored."""

    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    email: Optional[str] = Field(default=None, max_length=EMAIL_MAX_LENGTH)
    phone: Optional[str] = Field(default=None, max_length=PHONE_MAX_LENGTH)
    company: Optional[str] = Field(default=None, max_length=COMPANY_MAX_LENGTH)
    notes: Optional[str] = Field(default=None)


class ContactUpdate(ContactCreate):
    """
    Body of PUT /api/contacts/{id}: a partial update.

    Each mutable field is either present (with a value, possibly null) or
    absent. Absent fields keep their stored value; pydantic records which
    keys the client actually sent in `model_fields_set`.

    Example:
        {"phone": "555-1"}  → only phone changes
        {"email": null}     → email is cleared
    """

    def changes(self) -> Dict[str, Any]:
        """The fields present in the request body, mapped to their values."""
        return {
            field: getattr(self, field)
            for field in MUTABLE_FIELDS
            if field in self.model_fields_set
        }


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ContactResponse(BaseModel):
    """A stored contact row, as returned by every single-contact endpoint."""

    id: int = Field(description="Server-assigned identifier")
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(description="When the contact was created")

    model_config = {"from_attributes": True}


class ContactListResponse(BaseModel):
    """
    What:  Page of contacts plus the numbers a pager needs.
    Who:   Returned by GET /api/contacts.

    Offset pagination:
        total counts every row matching the search, before paging.
        pages = ceil(total / limit); it is 0 when nothing matches.
    """

    data: List[ContactResponse] = Field(description="Contacts on this page, newest first")
    page: int = Field(description="1-based page number that was served")
    limit: int = Field(description="Page size that was applied")
    total: int = Field(description="Number of contacts matching the search")
    pages: int = Field(description="Number of pages at this page size")


class DeleteResponse(BaseModel):
    success: bool = True


class HealthResponse(BaseModel):
    """Returned by GET /api/health when the store answers."""

    status: str = Field(default="ok")
    db: bool = Field(default=True, description="Whether the store round-trip succeeded")


class HealthErrorResponse(BaseModel):
    status: str = Field(default="error")
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (validation_error, not_found, conflict, internal_error)
        message: Human-readable description for display to users
        request_id: Correlation ID for tracing this error in server logs
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
