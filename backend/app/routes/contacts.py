"""
Contacts API - Contact Route Handlers
=======================================

What:  The five CRUD endpoints under /api/contacts.
How:   Extracts query/path/body values, delegates to ContactService, returns
       response models. Errors are raised as application exceptions and
       rendered by the global handlers in main.py.

Route Inventory:
    GET    /api/contacts        list/search/paginate
    GET    /api/contacts/{id}   fetch one
    POST   /api/contacts        create (201)
    PUT    /api/contacts/{id}   partial update
    DELETE /api/contacts/{id}   delete
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.exceptions import NotFoundError
from app.models.contact import MAX_SQL_INT
from app.repositories.contact_repository import ContactRepository
from app.schemas.contact import (
    ContactCreate,
    ContactListResponse,
    ContactResponse,
    ContactUpdate,
    DeleteResponse,
    ErrorResponse,
)
from app.services.contact_service import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    ContactService,
    parse_positive_int,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Contacts"])


# ── Dependencies ──────────────────────────────────────────────────────────

def get_repository(request: Request) -> ContactRepository:
    """The repository create_app() stored on the application."""
    return request.app.state.repository


def get_contact_service(
    repository: ContactRepository = Depends(get_repository),
) -> ContactService:
    return ContactService(repository)


def parse_contact_id(contact_id: str) -> int:
    """
    Path ids are parsed here rather than by FastAPI so that a non-numeric id
    is a plain 404 (there is no such contact), not a validation error. Ids
    beyond the INTEGER column range cannot name a row either.
    """
    try:
        number = int(contact_id, 10)
    except ValueError:
        raise NotFoundError(resource_id=contact_id) from None
    if not -MAX_SQL_INT - 1 <= number <= MAX_SQL_INT:
        raise NotFoundError(resource_id=contact_id)
    return number


# ── Routes ────────────────────────────────────────────────────────────────

@router.get(
    "/contacts",
    response_model=ContactListResponse,
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List contacts with search and pagination",
)
async def list_contacts(
    search: Optional[str] = Query(
        default=None,
        description="Substring matched against name, email and phone",
    ),
    page: Optional[str] = Query(default=None, description="1-based page number (default 1)"),
    limit: Optional[str] = Query(default=None, description="Page size (default 10)"),
    service: ContactService = Depends(get_contact_service),
) -> ContactListResponse:
    """
    Example:
        GET /api/contacts?search=lee&page=2&limit=5
        → {"data": [...], "page": 2, "limit": 5, "total": 12, "pages": 3}

    page and limit are accepted as raw strings and read leniently:
    garbage falls back to the default, zero or negative becomes 1.
    """
    return await service.list_contacts(
        search=search,
        page=parse_positive_int(page, DEFAULT_PAGE),
        limit=parse_positive_int(limit, DEFAULT_LIMIT),
    )


@router.get(
    "/contacts/{contact_id}",
    response_model=ContactResponse,
    responses={
        404: {"description": "Contact not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Get a single contact by id",
)
async def get_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    return await service.get_contact(parse_contact_id(contact_id))


@router.post(
    "/contacts",
    status_code=201,
    response_model=ContactResponse,
    responses={
        400: {"description": "Name missing or invalid body", "model": ErrorResponse},
        409: {"description": "Email already exists", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Create a contact",
)
async def create_contact(
    payload: ContactCreate,
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    """
    Returns the stored row, including the server-assigned id and created_at.
    """
    return await service.create_contact(payload)


@router.put(
    "/contacts/{contact_id}",
    response_model=ContactResponse,
    responses={
        400: {"description": "Blank name or invalid body", "model": ErrorResponse},
        404: {"description": "Contact not found", "model": ErrorResponse},
        409: {"description": "Email already exists", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Partially update a contact",
)
async def update_contact(
    contact_id: str,
    payload: ContactUpdate,
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    """
    Fields omitted from the body keep their stored values.

    Example:
        PUT /api/contacts/1  {"phone": "555-1"}
        → name, email, company and notes are unchanged
    """
    return await service.update_contact(parse_contact_id(contact_id), payload)


@router.delete(
    "/contacts/{contact_id}",
    response_model=DeleteResponse,
    responses={
        404: {"description": "Contact not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Delete a contact permanently",
)
async def delete_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
) -> DeleteResponse:
    return await service.delete_contact(parse_contact_id(contact_id))
