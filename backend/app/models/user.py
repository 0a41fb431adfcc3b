"""
Bookstore Backend — UserAccount SQLAlchemy Model
==================================================

What:  ORM model representing the `user_accounts` table.
Who:   Used by UserStore for inserts and lookups, and by Alembic.

Table Design:
    - UUID primary key generated in Python on insert
    - email is indexed but NOT unique; duplicate registrations are accepted
      unless `enforce_unique_email` is switched on
    - password_encoded holds a reversible Base64 encoding of the password,
      not a hash (see app.services.credentials)
    - contact_id references an external contact record; never validated
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserAccount(Base):
    """
    A registered user and their stored credential.

    Lifecycle:
        Created once by a registration call. This flow never updates or
        deletes it; `updated_at` only moves through other write paths.
    """

    __tablename__ = "user_accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Generated identifier, immutable after insert",
    )

    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        comment="Login lookup key (exact match, not unique)",
    )

    password_encoded: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Base64 of the UTF-8 password; reversible, not a hash",
    )

    contact_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        nullable=True,
        comment="External contact reference, not validated",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_user_accounts_email", "email"),
    )

    def __repr__(self) -> str:
        # No email: reprs end up in logs
        return f"<UserAccount(id={self.id}, created_at='{self.created_at}')>"
