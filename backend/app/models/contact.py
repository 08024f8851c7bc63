"""
Contacts API - Contact SQLAlchemy Model
=========================================

What:  ORM model representing the `contacts` table.
How:   Inherits from the shared DeclarativeBase; the schema initializer
       creates the table from Base.metadata.
Who:   Used by ContactRepository for every query.

Table Design:
    - Integer auto-increment primary key, assigned by the store on insert
    - email is nullable but unique (NULLs never collide)
    - created_at is filled by the store's CURRENT_TIMESTAMP default and
      never written by the application afterwards
    - Column lengths match the API request schema limits
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 150
PHONE_MAX_LENGTH = 30
COMPANY_MAX_LENGTH = 100

# Largest value a signed 64-bit INTEGER column (ids, OFFSET, LIMIT) can hold
MAX_SQL_INT = 2**63 - 1

# Columns a client may change through the update operation
MUTABLE_FIELDS = ("name", "email", "phone", "company", "notes")


class Contact(Base):
    """
    A person's contact details.

    Lifecycle:
        1. Created by POST /api/contacts (store assigns id and created_at)
        2. Mutated only by PUT /api/contacts/{id}, one or more of MUTABLE_FIELDS
        3. Deleted permanently by DELETE /api/contacts/{id}

    Query Patterns:
        - List newest first: ORDER BY created_at DESC, id DESC LIMIT :limit OFFSET :offset
          → idx_contacts_created_at
        - Get / update / delete by id → primary key
    """

    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(EMAIL_MAX_LENGTH),
        nullable=True,
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(PHONE_MAX_LENGTH),
        nullable=True,
    )

    company: Mapped[Optional[str]] = mapped_column(
        String(COMPANY_MAX_LENGTH),
        nullable=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    # Store-side default; the application never sets or updates this column
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_contacts_email"),
        # Scanned backwards for the newest-first listing
        Index("idx_contacts_created_at", "created_at", "id"),
        # Without AUTOINCREMENT, SQLite hands a deleted max id out again
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, name='{self.name}', email='{self.email}')>"
