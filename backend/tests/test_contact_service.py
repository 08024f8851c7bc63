"""
Contacts API - Contact Service Unit Tests
===========================================

What:  Tests for ContactService business rules with a mocked repository.

What we test:
    ✅ Name validation happens before any store access
    ✅ Optional fields are trimmed and empty values become None
    ✅ Partial update forwards only the fields the client sent
    ✅ Not-found handling for get, update and delete
    ✅ Pagination arithmetic (offset, pages, flooring)
    ✅ Lenient page/limit parsing
"""

import pytest

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.contact import MAX_SQL_INT
from app.schemas.contact import ContactCreate, ContactUpdate
from app.services.contact_service import ContactService, parse_positive_int


class TestCreateContact:
    """Tests for create_contact validation and normalization."""

    @pytest.mark.asyncio
    async def test_missing_name_rejected_without_store_access(self, mock_repository):
        service = ContactService(mock_repository)

        with pytest.raises(ValidationError) as exc_info:
            await service.create_contact(ContactCreate(email="ann@x.com"))

        assert exc_info.value.message == "Name is required"
        mock_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, mock_repository):
        service = ContactService(mock_repository)

        with pytest.raises(ValidationError):
            await service.create_contact(ContactCreate(name="   "))

        mock_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fields_trimmed_and_empty_optionals_nulled(self, mock_repository, make_contact):
        mock_repository.create.return_value = make_contact(id=7)
        service = ContactService(mock_repository)

        await service.create_contact(
            ContactCreate(name="  Ann Lee ", email="", phone=" 555-1 ", company="   ")
        )

        mock_repository.create.assert_awaited_once_with({
            "name": "Ann Lee",
            "email": None,
            "phone": "555-1",
            "company": None,
            "notes": None,
        })

    @pytest.mark.asyncio
    async def test_returns_stored_row(self, mock_repository, make_contact):
        mock_repository.create.return_value = make_contact(id=7, phone="555-1")
        service = ContactService(mock_repository)

        result = await service.create_contact(ContactCreate(name="Ann Lee", phone="555-1"))

        assert result.id == 7
        assert result.phone == "555-1"

    @pytest.mark.asyncio
    async def test_conflict_propagates(self, mock_repository):
        mock_repository.create.side_effect = ConflictError(field="email")
        service = ContactService(mock_repository)

        with pytest.raises(ConflictError):
            await service.create_contact(ContactCreate(name="Ann", email="ann@x.com"))


class TestUpdateContact:
    """Tests for partial update semantics."""

    @pytest.mark.asyncio
    async def test_only_sent_fields_forwarded(self, mock_repository, make_contact):
        mock_repository.update.return_value = make_contact(phone="555-1")
        service = ContactService(mock_repository)

        payload = ContactUpdate.model_validate({"phone": "555-1"})
        result = await service.update_contact(1, payload)

        mock_repository.update.assert_awaited_once_with(1, {"phone": "555-1"})
        assert result.email == "ann@x.com"

    @pytest.mark.asyncio
    async def test_explicit_null_clears_field(self, mock_repository, make_contact):
        mock_repository.update.return_value = make_contact(email=None)
        service = ContactService(mock_repository)

        payload = ContactUpdate.model_validate({"email": None, "notes": ""})
        await service.update_contact(1, payload)

        mock_repository.update.assert_awaited_once_with(1, {"email": None, "notes": None})

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, mock_repository):
        service = ContactService(mock_repository)

        with pytest.raises(ValidationError) as exc_info:
            await service.update_contact(1, ContactUpdate.model_validate({"name": " "}))

        assert exc_info.value.field == "name"
        mock_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_null_name_rejected(self, mock_repository):
        service = ContactService(mock_repository)

        with pytest.raises(ValidationError):
            await service.update_contact(1, ContactUpdate.model_validate({"name": None}))

    @pytest.mark.asyncio
    async def test_missing_contact_raises_not_found(self, mock_repository):
        mock_repository.update.return_value = None
        service = ContactService(mock_repository)

        with pytest.raises(NotFoundError):
            await service.update_contact(99, ContactUpdate.model_validate({"phone": "1"}))

    @pytest.mark.asyncio
    async def test_empty_body_returns_current_row(self, mock_repository, make_contact):
        mock_repository.get.return_value = make_contact()
        service = ContactService(mock_repository)

        result = await service.update_contact(1, ContactUpdate())

        assert result.name == "Ann Lee"
        mock_repository.update.assert_not_awaited()


class TestGetAndDelete:

    @pytest.mark.asyncio
    async def test_get_found(self, mock_repository, make_contact):
        mock_repository.get.return_value = make_contact(id=3)

        result = await ContactService(mock_repository).get_contact(3)

        assert result.id == 3

    @pytest.mark.asyncio
    async def test_get_not_found(self, mock_repository):
        mock_repository.get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await ContactService(mock_repository).get_contact(3)

        assert exc_info.value.message == "Contact not found"

    @pytest.mark.asyncio
    async def test_delete_success(self, mock_repository):
        mock_repository.delete.return_value = True

        result = await ContactService(mock_repository).delete_contact(3)

        assert result.success is True

    @pytest.mark.asyncio
    async def test_delete_not_found(self, mock_repository):
        mock_repository.delete.return_value = False

        with pytest.raises(NotFoundError):
            await ContactService(mock_repository).delete_contact(3)


class TestListContacts:
    """Tests for search normalization and pagination arithmetic."""

    @pytest.mark.asyncio
    async def test_offset_and_pages(self, mock_repository, make_contact):
        mock_repository.list_page.return_value = ([make_contact(id=5)], 21)
        service = ContactService(mock_repository)

        result = await service.list_contacts(search="  lee ", page=3, limit=10)

        mock_repository.list_page.assert_awaited_once_with(search="lee", limit=10, offset=20)
        assert result.total == 21
        assert result.pages == 3
        assert result.page == 3
        assert [c.id for c in result.data] == [5]

    @pytest.mark.asyncio
    async def test_blank_search_means_no_filter(self, mock_repository):
        mock_repository.list_page.return_value = ([], 0)

        await ContactService(mock_repository).list_contacts(search="   ")

        mock_repository.list_page.assert_awaited_once_with(search=None, limit=10, offset=0)

    @pytest.mark.asyncio
    async def test_page_and_limit_floored(self, mock_repository):
        mock_repository.list_page.return_value = ([], 4)

        result = await ContactService(mock_repository).list_contacts(page=0, limit=-5)

        assert result.page == 1
        assert result.limit == 1
        assert result.pages == 4

    @pytest.mark.asyncio
    async def test_huge_page_and_limit_capped(self, mock_repository):
        mock_repository.list_page.return_value = ([], 3)

        result = await ContactService(mock_repository).list_contacts(
            page=10**20, limit=10**20
        )

        mock_repository.list_page.assert_awaited_once_with(
            search=None, limit=MAX_SQL_INT, offset=MAX_SQL_INT
        )
        assert result.page == 10**20
        assert result.limit == MAX_SQL_INT
        assert result.pages == 1

    @pytest.mark.asyncio
    async def test_empty_store(self, mock_repository):
        mock_repository.list_page.return_value = ([], 0)

        result = await ContactService(mock_repository).list_contacts()

        assert result.data == []
        assert result.total == 0
        assert result.pages == 0


class TestParsePositiveInt:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, 10),
            ("3", 3),
            (" 4 ", 4),
            ("2.7", 2),
            ("0", 1),
            ("-8", 1),
            ("12abc", 12),
            ("1e3", 1),
            ("abc", 10),
            ("", 10),
            ("9" * 5000, MAX_SQL_INT),
        ],
    )
    def test_values(self, raw, expected):
        assert parse_positive_int(raw, 10) == expected
