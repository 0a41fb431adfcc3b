"""
Bookstore Backend — Registration Service (Business Logic)
===========================================================

What:  User registration (with or without attachments), login, and lookup.
How:   Validates input, encodes credentials, and delegates persistence to
       UserStore and AttachmentService.
Who:   Called by the user route handlers.

Flow (POST /userRegisterwithfile):
    ┌───────────┐    ┌────────────┐    ┌─────────────┐    ┌──────────────┐
    │ Validate  │───▶│  Encode    │───▶│ UserStore   │───▶│ Attachments  │
    │ email/pwd │    │  password  │    │ .create()   │    │ .store_many()│
    └───────────┘    └────────────┘    └─────────────┘    └──────────────┘

    Validation failure → ValidationError, nothing touches the database.
    Account insert failure → DatabaseError, no attachments attempted.
    Attachment failure → logged and skipped (see AttachmentService).

The service keeps no state between calls. The database session is passed
into every operation by the caller.
"""

import logging
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import AuthenticationError, NotFoundError, ValidationError
from app.models.user import UserAccount
from app.schemas.attachment import AttachmentUpload
from app.schemas.user import LoginRequest, UserRegData
from app.services.attachment_service import AttachmentService
from app.services.credentials import encode_password, passwords_match
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

EMPTY_CREDENTIALS_MESSAGE = "Email and Password cannot be empty"
INVALID_CREDENTIALS_MESSAGE = "Invalid Email and Password"
DUPLICATE_EMAIL_MESSAGE = "Email already registered"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _require_credentials(email: Optional[str], password: Optional[str]) -> None:
    if _is_blank(email) or _is_blank(password):
        raise ValidationError(message=EMPTY_CREDENTIALS_MESSAGE, field="email,password")


class RegistrationService:
    """
    Registration and login operations.

    Error Handling Strategy:
        Raises ValidationError, AuthenticationError, NotFoundError or
        DatabaseError. The global handlers in app.main turn these into the
        ResponseMessage envelope; nothing here is fatal to the request.
    """

    def __init__(
        self,
        users: Optional[UserStore] = None,
        attachments: Optional[AttachmentService] = None,
        enforce_unique_email: Optional[bool] = None,
    ):
        self.users = users or UserStore()
        self.attachments = attachments or AttachmentService()
        if enforce_unique_email is None:
            enforce_unique_email = settings.enforce_unique_email
        self.enforce_unique_email = enforce_unique_email

    async def register(self, db: AsyncSession, data: Optional[UserRegData]) -> UserAccount:
        """
        Create one UserAccount with an encoded password.

        Args:
            db: Async database session (injected by FastAPI)
            data: Registration payload; may be None when the body was empty

        Returns:
            The flushed UserAccount with its generated id

        Raises:
            ValidationError: email or password missing/blank, or duplicate
                             email while uniqueness is enforced
            DatabaseError: the insert failed
        """
        if data is None:
            raise ValidationError(message=EMPTY_CREDENTIALS_MESSAGE)
        _require_credentials(data.email, data.password)

        if self.enforce_unique_email:
            existing = await self.users.find_by_email(db, data.email)
            if existing is not None:
                raise ValidationError(message=DUPLICATE_EMAIL_MESSAGE, field="email")

        user = await self.users.create(
            db,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            password_encoded=encode_password(data.password),
            contact_id=data.contact_id,
        )
        logger.info("User registered: %s", user.id)
        return user

    async def register_with_attachments(
        self,
        db: AsyncSession,
        data: Optional[UserRegData],
        files: Optional[Sequence[AttachmentUpload]] = None,
    ) -> UserAccount:
        """
        Register a user, then store each uploaded file as an Attachment.

        The account is returned whatever happens to the attachments; each
        file succeeds or fails on its own.
        """
        user = await self.register(db, data)

        if files:
            stored = await self.attachments.store_many(db, files)
            logger.info(
                "Registration %s: stored %d/%d attachments",
                user.id,
                len(stored),
                len(files),
            )
        return user

    async def login(self, db: AsyncSession, data: Optional[LoginRequest]) -> UserAccount:
        """
        Stateless credential check; no session or token is issued.

        Raises:
            ValidationError: email or password missing/blank (no lookup done)
            AuthenticationError: unknown email or wrong password, reported
                                 with the same message
            DatabaseError: the lookup failed
        """
        if data is None:
            raise ValidationError(message=EMPTY_CREDENTIALS_MESSAGE)
        _require_credentials(data.email, data.password)

        user = await self.users.find_by_email(db, data.email)
        if user is None:
            logger.debug("Login rejected: unknown email %s", data.email)
            raise AuthenticationError(context={"reason": "unknown_email"})

        if not passwords_match(user.password_encoded, data.password):
            logger.debug("Login rejected: password mismatch for %s", user.id)
            raise AuthenticationError(context={"reason": "password_mismatch"})

        logger.info("User logged in: %s", user.id)
        return user

    async def get_user(self, db: AsyncSession, user_id: UUID) -> UserAccount:
        """Fetch one account by id; NotFoundError when absent."""
        user = await self.users.find_by_id(db, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user


def get_registration_service() -> RegistrationService:
    """FastAPI dependency; override it in tests to inject fakes."""
    return RegistrationService()
