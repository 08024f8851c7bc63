"""
Contacts API - Contact Service (Business Rules)
=================================================

What:  Validation, normalization, pagination arithmetic and not-found
       handling for contacts, independent of HTTP.
How:   Wraps a ContactRepository; every method converts schema objects into
       repository calls and repository results into response models.
Who:   Built per request by the get_contact_service dependency in
       app.routes.contacts; calls the repository only.

Flow (POST /api/contacts):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │  Route   │───▶│  Validate &  │───▶│  Repository  │───▶│  Store   │
    │          │    │  Normalize   │    │  create()    │    │  INSERT  │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘

    Validation failures raise before the repository is called.
"""

import logging
import math
import re
from typing import Any, Dict, Optional

from app.exceptions import NotFoundError, ValidationError
from app.models.contact import MAX_SQL_INT
from app.repositories.contact_repository import ContactRepository
from app.schemas.contact import (
    ContactCreate,
    ContactListResponse,
    ContactResponse,
    ContactUpdate,
    DeleteResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_positive_int(raw: Optional[str], default: int) -> int:
    """
    Read a page/limit query value the lenient way browsers' pagers expect.

    Only the leading integer digits count ("3", " 3 ", "2.7" → 2,
    "12abc" → 12, "1e3" → 1); a value with no leading digits falls back to
    `default`; the result is clamped to 1..MAX_SQL_INT.

        >>> parse_positive_int("0", 10)
        1
        >>> parse_positive_int("abc", 10)
        10
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if match is None:
        return default
    digits = match.group(1)
    try:
        number = int(digits)
    except ValueError:
        # past the interpreter's int conversion digit limit
        number = 0 if digits.startswith("-") else MAX_SQL_INT
    return min(max(number, 1), MAX_SQL_INT)


def _clean_optional(value: Optional[str]) -> Optional[str]:
    """Trim an optional text field; empty becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class ContactService:
    """
    Business logic layer for contact operations.

    Responsibilities:
        - list_contacts(): search + offset pagination
        - get_contact(): single contact with not-found handling
        - create_contact(): name validation, optional-field normalization
        - update_contact(): partial update of the fields the client sent
        - delete_contact(): permanent delete with not-found handling

    Errors from the repository (ConflictError, InternalError) propagate
    unchanged to the global exception handlers.
    """

    def __init__(self, repository: ContactRepository):
        self.repository = repository

    async def list_contacts(
        self,
        search: Optional[str] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> ContactListResponse:
        """
        Return one page of contacts, newest first.

        Args:
            search: Free text; trimmed, empty means no filter
            page: 1-based page number (floored to 1)
            limit: Page size (floored to 1, so pages never divides by zero)

        LIMIT and OFFSET are capped at the largest INTEGER the store can
        bind; a page that far out is simply empty.
        """
        search = (search or "").strip()
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_SQL_INT)
        offset = min((page - 1) * limit, MAX_SQL_INT)

        rows, total = await self.repository.list_page(
            search=search or None,
            limit=limit,
            offset=offset,
        )

        return ContactListResponse(
            data=[ContactResponse.model_validate(row) for row in rows],
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        )

    async def get_contact(self, contact_id: int) -> ContactResponse:
        contact = await self.repository.get(contact_id)
        if contact is None:
            raise NotFoundError(resource_id=contact_id)
        return ContactResponse.model_validate(contact)

    async def create_contact(self, payload: ContactCreate) -> ContactResponse:
        """
        Create a contact from a request body.

        Raises:
            ValidationError: name missing or blank (no store access)
            ConflictError: email already used by another contact
            InternalError: store failure
        """
        name = (payload.name or "").strip()
        if not name:
            raise ValidationError(message="Name is required", field="name")

        fields: Dict[str, Any] = {
            "name": name,
            "email": _clean_optional(payload.email),
            "phone": _clean_optional(payload.phone),
            "company": _clean_optional(payload.company),
            "notes": _clean_optional(payload.notes),
        }

        contact = await self.repository.create(fields)
        return ContactResponse.model_validate(contact)

    async def update_contact(self, contact_id: int, payload: ContactUpdate) -> ContactResponse:
        """
        Partially update a contact.

        Only fields present in the body are written; a field sent as null or
        empty clears an optional column. A present name must not be blank.

        Raises:
            ValidationError: name sent but blank or null
            NotFoundError: no contact with this id (checked before writing)
            ConflictError: email already used by another contact
        """
        changes = payload.changes()

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError(message="Name cannot be empty", field="name")
            changes["name"] = name

        for field in ("email", "phone", "company", "notes"):
            if field in changes:
                changes[field] = _clean_optional(changes[field])

        if not changes:
            return await self.get_contact(contact_id)

        contact = await self.repository.update(contact_id, changes)
        if contact is None:
            raise NotFoundError(resource_id=contact_id)
        return ContactResponse.model_validate(contact)

    async def delete_contact(self, contact_id: int) -> DeleteResponse:
        deleted = await self.repository.delete(contact_id)
        if not deleted:
            raise NotFoundError(resource_id=contact_id)
        return DeleteResponse(success=True)
