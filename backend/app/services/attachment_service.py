"""
Bookstore Backend — Attachment Storage Service
================================================

What:  Validates and stores files uploaded alongside a registration.
How:   Each file becomes one `attachments` row holding its bytes, name and
       content type exactly as received.
Who:   Called by RegistrationService.register_with_attachments().

Partial Failure Model:
    store_many() wraps every file in its own SAVEPOINT. If one insert
    fails, only that savepoint is rolled back; the user account inserted
    earlier in the same transaction and every other attachment survive.
    Failures are logged and not reported back to the caller.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import BookstoreError, DatabaseError, ValidationError
from app.models.attachment import Attachment
from app.schemas.attachment import AttachmentUpload

logger = logging.getLogger(__name__)


class AttachmentService:
    """Stores attachment rows; holds no per-request state."""

    def __init__(self, max_size: Optional[int] = None):
        """
        Args:
            max_size: Override the size limit in bytes (used in tests).
                      If None, uses settings.max_attachment_size.
        """
        self.max_size = max_size or settings.max_attachment_size

    def validate_size(self, upload: AttachmentUpload) -> None:
        """
        Reject files above the configured limit. Empty files are accepted
        and stored as zero-byte rows.

        Raises:
            ValidationError with a human-readable size limit message
        """
        size = len(upload.data)
        if size > self.max_size:
            max_mb = self.max_size / (1024 * 1024)
            raise ValidationError(
                message=f"File size ({size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="files",
                context={"filename": upload.filename, "actual_size": size, "max_size": self.max_size},
            )

    async def store(self, db: AsyncSession, upload: AttachmentUpload) -> Attachment:
        """
        Validate and insert a single attachment.

        Raises:
            ValidationError: file too large
            DatabaseError: insert rejected by the database
        """
        self.validate_size(upload)

        attachment = Attachment(
            file_name=upload.filename,
            file_type=upload.content_type,
            data=upload.data,
        )
        try:
            db.add(attachment)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to store attachment %s: %s", upload.filename, str(e))
            raise DatabaseError(
                message="Could not save the attachment",
                detail=str(getattr(e, "orig", None) or e),
                context={"filename": upload.filename},
            ) from e

        logger.info("Attachment stored: %s (%d bytes)", attachment.id, attachment.size)
        return attachment

    async def store_many(
        self,
        db: AsyncSession,
        uploads: Sequence[AttachmentUpload],
    ) -> List[Attachment]:
        """
        Store every upload independently; return the ones that were saved.

        A failure on one file (validation or database) is logged at WARNING
        and does not affect the others.
        """
        stored: List[Attachment] = []
        for index, upload in enumerate(uploads):
            try:
                async with db.begin_nested():
                    stored.append(await self.store(db, upload))
            except (BookstoreError, SQLAlchemyError) as e:
                logger.warning(
                    "Skipping attachment #%d (%s): %s",
                    index,
                    upload.filename or "unnamed",
                    getattr(e, "message", str(e)),
                )

        if len(stored) != len(uploads):
            logger.warning("Stored %d of %d attachments", len(stored), len(uploads))
        return stored
