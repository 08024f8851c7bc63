"""
Contacts API - Contact Repository (Data Access)
=================================================

What:  Every query the service issues against the `contacts` table, plus the
       startup schema-ensure step and the health round-trip.
How:   Holds one AsyncEngine and a session factory bound to it. Each
       operation opens its own session/transaction, so no state is shared
       between requests beyond the connection pool.
Who:   Constructed once per application in create_app(), stored on
       app.state, and injected into handlers through ContactService.

Error translation:
    SQLAlchemy and driver exceptions never leave this module. They are
    converted into the application taxonomy:
        IntegrityError on email → ConflictError(field="email")
        any other store failure → InternalError(<driver message>), including
        connect timeouts and integers the driver cannot bind
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from sqlalchemy import delete, func, or_, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.database import Base, create_session_factory, dispose_engine
from app.exceptions import ConflictError, InternalError
from app.models.contact import Contact

logger = logging.getLogger(__name__)


def _driver_message(exc: BaseException) -> str:
    """The DBAPI's own message when SQLAlchemy wrapped one, else str(exc)."""
    orig = getattr(exc, "orig", None)
    return str(orig if orig is not None else exc) or type(exc).__name__


class ContactRepository:
    """
    Data access layer for contacts.

    Responsibilities:
        - ensure_schema(): idempotent CREATE TABLE IF NOT EXISTS
        - ping(): trivial round-trip for the health check
        - list_page(): count + one page of rows, optionally filtered
        - get() / create() / update() / delete(): single-row operations
        - dispose(): close pooled connections on shutdown
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = create_session_factory(engine)

    # ── Error Translation ─────────────────────────────────────────────────

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except IntegrityError as e:
            message = _driver_message(e)
            if "email" in message.lower():
                logger.info("Email uniqueness violation during %s", operation)
                raise ConflictError(field="email", context={"operation": operation}) from e
            logger.error("Integrity error during %s: %s", operation, message)
            raise InternalError(message=message, context={"operation": operation}) from e
        except (SQLAlchemyError, OSError, OverflowError, asyncio.TimeoutError) as e:
            message = _driver_message(e)
            logger.error("Database error during %s: %s", operation, message)
            raise InternalError(
                message=message,
                context={"operation": operation, "error_type": type(e).__name__},
            ) from e

    # ── Schema & Health ───────────────────────────────────────────────────

    async def ensure_schema(self) -> None:
        """
        Create the contacts table (with its unique email constraint and
        index) if it does not exist yet.

        create_all() checks for each table before issuing CREATE, so this is
        a no-op on an existing schema and never touches stored rows.
        """
        async with self._translate_errors("ensure_schema"):
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("Schema ensured: table '%s'", Contact.__tablename__)

    async def ping(self) -> bool:
        """Run SELECT 1; True when the store answered with 1."""
        async with self._translate_errors("ping"):
            async with self.engine.connect() as conn:
                result = await conn.execute(text("SELECT 1 AS ok"))
                return result.scalar() == 1

    # ── Queries ───────────────────────────────────────────────────────────

    async def list_page(
        self,
        search: Optional[str],
        limit: int,
        offset: int,
    ) -> Tuple[List[Contact], int]:
        """
        Count the matching rows and fetch one page of them, newest first.

        Search is a literal substring match on name, email or phone;
        autoescape=True escapes the store's LIKE wildcards in the user text.

        Returns:
            (rows on this page, total matching rows before pagination)
        """
        conditions = []
        if search:
            conditions.append(
                or_(
                    Contact.name.contains(search, autoescape=True),
                    Contact.email.contains(search, autoescape=True),
                    Contact.phone.contains(search, autoescape=True),
                )
            )

        count_query = select(func.count()).select_from(Contact).where(*conditions)
        page_query = (
            select(Contact)
            .where(*conditions)
            .order_by(Contact.created_at.desc(), Contact.id.desc())
            .limit(limit)
            .offset(offset)
        )

        async with self._translate_errors("list"):
            async with self._session_factory() as session:
                total = (await session.execute(count_query)).scalar_one()
                rows = list((await session.execute(page_query)).scalars().all())

        return rows, total

    async def get(self, contact_id: int) -> Optional[Contact]:
        async with self._translate_errors("get"):
            async with self._session_factory() as session:
                return await session.get(Contact, contact_id)

    async def create(self, fields: Dict[str, Any]) -> Contact:
        """
        Insert one contact and return it as stored.

        The refresh after flush loads the store-assigned id and created_at
        inside the same transaction.
        """
        async with self._translate_errors("create"):
            async with self._session_factory() as session:
                async with session.begin():
                    contact = Contact(**fields)
                    session.add(contact)
                    await session.flush()
                    await session.refresh(contact)
        logger.info("Contact %s created", contact.id)
        return contact

    async def update(self, contact_id: int, changes: Dict[str, Any]) -> Optional[Contact]:
        """
        Apply `changes` to an existing contact.

        Only the keys in `changes` are written; every other column keeps its
        stored value. Returns None (and writes nothing) if the id is unknown.
        """
        async with self._translate_errors("update"):
            async with self._session_factory() as session:
                async with session.begin():
                    contact = await session.get(Contact, contact_id)
                    if contact is None:
                        return None
                    for field, value in changes.items():
                        setattr(contact, field, value)
                    await session.flush()
        logger.info("Contact %s updated: %s", contact_id, sorted(changes))
        return contact

    async def delete(self, contact_id: int) -> bool:
        """Delete by id; True if a row was removed."""
        async with self._translate_errors("delete"):
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        delete(Contact).where(Contact.id == contact_id)
                    )
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Contact %s deleted", contact_id)
        return deleted

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def dispose(self) -> None:
        await dispose_engine(self.engine)
