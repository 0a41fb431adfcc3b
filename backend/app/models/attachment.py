"""
Bookstore Backend — Attachment SQLAlchemy Model
=================================================

What:  ORM model for the `attachments` table (binary files uploaded
       alongside a registration).
How:   File bytes are stored in the row itself (LargeBinary → BYTEA on
       PostgreSQL); name and content type are copied verbatim from the part.

There is no foreign key to `user_accounts`: each attachment is inserted
independently during a multi-file registration.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, LargeBinary, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.user import _utcnow


class Attachment(Base):
    """A stored file part. Created once, never modified by this flow."""

    __tablename__ = "attachments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    file_type: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

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

    @property
    def size(self) -> int:
        return len(self.data or b"")

    def __repr__(self) -> str:
        return f"<Attachment(id={self.id}, file_name='{self.file_name}', size={self.size})>"
