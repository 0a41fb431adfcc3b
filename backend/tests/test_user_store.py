"""
Bookstore Backend — User Store Tests (in-memory SQLite)
=========================================================

What:  Runs UserStore and the registration flow against a real SQLAlchemy
       session on aiosqlite.

What we test:
    ✅ create() assigns id and timestamps on flush
    ✅ find_by_id / find_by_email exact-match semantics
    ✅ Duplicate emails: the earliest registration is returned
    ✅ Attachments and the account persist together after commit
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.database import commit_session
from app.exceptions import DatabaseError
from app.models.attachment import Attachment
from app.models.user import UserAccount
from app.schemas.attachment import AttachmentUpload
from app.schemas.user import UserRegData
from app.services.attachment_service import AttachmentService
from app.services.credentials import encode_password
from app.services.registration_service import RegistrationService
from app.services.user_store import UserStore


class TestUserStore:

    def setup_method(self):
        self.store = UserStore()

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, db_session_factory):
        async with db_session_factory() as db:
            user = await self.store.create(
                db, email="a@x.com", password_encoded=encode_password("secret"), first_name="A"
            )
            assert user.id is not None
            assert user.created_at is not None
            assert user.updated_at is not None
            await db.commit()

        async with db_session_factory() as db:
            found = await self.store.find_by_id(db, user.id)
            assert found is not None
            assert found.first_name == "A"
            assert found.password_encoded == "c2VjcmV0"

    @pytest.mark.asyncio
    async def test_find_by_id_missing(self, db_session_factory):
        async with db_session_factory() as db:
            assert await self.store.find_by_id(db, uuid4()) is None

    @pytest.mark.asyncio
    async def test_find_by_email_is_exact(self, db_session_factory):
        async with db_session_factory() as db:
            await self.store.create(db, email="a@x.com", password_encoded="eA==")
            await db.commit()

            assert await self.store.find_by_email(db, "a@x.com") is not None
            assert await self.store.find_by_email(db, "A@X.COM") is None
            assert await self.store.find_by_email(db, " a@x.com") is None

    @pytest.mark.asyncio
    async def test_find_by_email_returns_earliest_duplicate(self, db_session_factory):
        now = datetime.now(timezone.utc)
        async with db_session_factory() as db:
            later = UserAccount(email="dup@x.com", password_encoded="Yg==", created_at=now)
            earlier = UserAccount(
                email="dup@x.com", password_encoded="YQ==", created_at=now - timedelta(minutes=5)
            )
            db.add_all([later, earlier])
            await db.commit()

            found = await self.store.find_by_email(db, "dup@x.com")
            assert found.id == earlier.id

    @pytest.mark.asyncio
    async def test_flush_error_wrapped(self, db_session_factory):
        async with db_session_factory() as db:
            with pytest.raises(DatabaseError):
                # email is NOT NULL
                await self.store.create(db, email=None, password_encoded="eA==")


class TestRegistrationPersistence:

    @pytest.mark.asyncio
    async def test_register_with_attachments_persists_all_rows(self, db_session_factory):
        service = RegistrationService(
            users=UserStore(),
            attachments=AttachmentService(max_size=1024),
            enforce_unique_email=False,
        )
        files = [
            AttachmentUpload(filename="a.txt", content_type="text/plain", data=b"hello"),
            AttachmentUpload(filename="too-big.bin", content_type="application/octet-stream", data=b"x" * 2048),
            AttachmentUpload(filename="c.png", content_type="image/png", data=b"\x89PNG\r\n"),
        ]

        async with db_session_factory() as db:
            user = await service.register_with_attachments(
                db,
                UserRegData(first_name="A", email="a@x.com", password="secret"),
                files,
            )
            await db.commit()

        async with db_session_factory() as db:
            users = (await db.execute(select(func.count(UserAccount.id)))).scalar()
            names = (await db.execute(select(Attachment.file_name).order_by(Attachment.file_name))).scalars().all()
            stored_user = await UserStore().find_by_id(db, user.id)

        assert users == 1
        assert names == ["a.txt", "c.png"]
        assert stored_user.email == "a@x.com"


class TestCommitSession:

    @pytest.mark.asyncio
    async def test_commit_error_wrapped_and_rolled_back(self, mock_db_session):
        mock_db_session.commit = AsyncMock(
            side_effect=OperationalError("COMMIT", {}, Exception("connection lost at commit"))
        )

        with pytest.raises(DatabaseError) as exc_info:
            await commit_session(mock_db_session)

        assert exc_info.value.detail == "connection lost at commit"
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_committed_rows_visible_to_other_sessions(self, db_session_factory):
        async with db_session_factory() as db:
            await UserStore().create(db, email="a@x.com", password_encoded="eA==")
            await commit_session(db)

        async with db_session_factory() as db:
            assert await UserStore().find_by_email(db, "a@x.com") is not None
