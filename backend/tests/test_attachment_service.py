"""
Bookstore Backend — Attachment Service Unit Tests
===================================================

What we test:
    ✅ Size limit (boundary, over limit, empty file accepted)
    ✅ Metadata and bytes copied verbatim into the row
    ✅ One failing file does not stop the others (savepoint per file)
    ✅ Database errors are wrapped in DatabaseError
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError, ValidationError
from app.models.attachment import Attachment
from app.schemas.attachment import AttachmentUpload
from app.services.attachment_service import AttachmentService


def _upload(name="doc.pdf", data=b"%PDF-1.4", content_type="application/pdf"):
    return AttachmentUpload(filename=name, content_type=content_type, data=data)


class TestSizeValidation:

    def setup_method(self):
        self.service = AttachmentService(max_size=1024)

    def test_within_limit(self):
        self.service.validate_size(_upload(data=b"x" * 100))

    def test_at_limit(self):
        self.service.validate_size(_upload(data=b"x" * 1024))

    def test_over_limit(self):
        with pytest.raises(ValidationError, match="exceeds maximum"):
            self.service.validate_size(_upload(data=b"x" * 1025))

    def test_empty_file_accepted(self):
        self.service.validate_size(_upload(data=b""))


class TestStore:

    def setup_method(self):
        self.service = AttachmentService(max_size=1024)

    @pytest.mark.asyncio
    async def test_store_copies_metadata_verbatim(self, mock_db_session):
        upload = _upload(name="My Résumé.PDF", content_type="application/x-custom", data=b"\x00\x01\x02")

        attachment = await self.service.store(mock_db_session, upload)

        assert isinstance(attachment, Attachment)
        assert attachment.file_name == "My Résumé.PDF"
        assert attachment.file_type == "application/x-custom"
        assert attachment.data == b"\x00\x01\x02"
        mock_db_session.add.assert_called_once_with(attachment)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_store_wraps_database_errors(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=OperationalError("INSERT INTO attachments", {}, Exception("disk I/O error"))
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.store(mock_db_session, _upload())
        assert "disk I/O error" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_store_rejects_oversize_before_insert(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.store(mock_db_session, _upload(data=b"x" * 2048))
        mock_db_session.add.assert_not_called()


class TestStoreMany:

    def setup_method(self):
        self.service = AttachmentService(max_size=1024)

    @pytest.mark.asyncio
    async def test_each_file_gets_its_own_savepoint(self, mock_db_session):
        uploads = [_upload("a"), _upload("b"), _upload("c")]

        stored = await self.service.store_many(mock_db_session, uploads)

        assert [a.file_name for a in stored] == ["a", "b", "c"]
        assert mock_db_session.begin_nested.call_count == 3

    @pytest.mark.asyncio
    async def test_failure_on_one_file_keeps_the_others(self, mock_db_session):
        first, third = Attachment(file_name="a"), Attachment(file_name="c")
        with patch.object(
            self.service,
            "store",
            AsyncMock(side_effect=[first, DatabaseError(detail="constraint"), third]),
        ):
            stored = await self.service.store_many(
                mock_db_session, [_upload("a"), _upload("b"), _upload("c")]
            )

        assert stored == [first, third]

    @pytest.mark.asyncio
    async def test_oversize_file_skipped(self, mock_db_session):
        uploads = [_upload("small"), _upload("huge", data=b"x" * 4096)]

        stored = await self.service.store_many(mock_db_session, uploads)

        assert [a.file_name for a in stored] == ["small"]

    @pytest.mark.asyncio
    async def test_empty_list(self, mock_db_session):
        assert await self.service.store_many(mock_db_session, []) == []
        mock_db_session.begin_nested.assert_not_called()
