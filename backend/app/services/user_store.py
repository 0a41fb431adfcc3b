"""
Bookstore Backend — User Store
================================

What:  Persistence operations for UserAccount rows.
How:   Thin async SQLAlchemy queries against the session passed in by the
       caller. Inserts are flushed (not committed) so the generated id and
       timestamps are available before the request transaction commits.
Who:   Called by RegistrationService.

Operations:
    create()         INSERT, flush, return the row
    find_by_id()     SELECT ... WHERE id = :id
    find_by_email()  SELECT ... WHERE email = :email ORDER BY created_at LIMIT 1
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import asc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError
from app.models.user import UserAccount

logger = logging.getLogger(__name__)


class UserStore:
    """Stateless; every method receives the session to use."""

    async def create(
        self,
        db: AsyncSession,
        *,
        email: str,
        password_encoded: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        contact_id: Optional[int] = None,
    ) -> UserAccount:
        """
        Insert one UserAccount and flush it.

        Raises:
            DatabaseError: the insert was rejected by the database.
        """
        user = UserAccount(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_encoded=password_encoded,
            contact_id=contact_id,
        )
        try:
            db.add(user)
            await db.flush()  # Assigns id and timestamps without committing
        except SQLAlchemyError as e:
            logger.error("Failed to insert user account: %s", str(e))
            raise DatabaseError(
                message="Could not save the user account",
                detail=str(getattr(e, "orig", None) or e),
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("User account created: %s", user.id)
        return user

    async def find_by_id(self, db: AsyncSession, user_id: UUID) -> Optional[UserAccount]:
        try:
            result = await db.execute(select(UserAccount).where(UserAccount.id == user_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the user",
                detail=str(getattr(e, "orig", None) or e),
                context={"user_id": str(user_id)},
            ) from e

    async def find_by_email(self, db: AsyncSession, email: str) -> Optional[UserAccount]:
        """
        Exact-match lookup by email.

        Emails are not unique; with duplicates the earliest registration wins.
        """
        query = (
            select(UserAccount)
            .where(UserAccount.email == email)
            .order_by(asc(UserAccount.created_at))
            .limit(1)
        )
        try:
            result = await db.execute(query)
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user by email: %s", str(e))
            raise DatabaseError(
                message="Could not look up the user",
                detail=str(getattr(e, "orig", None) or e),
                context={"error_type": type(e).__name__},
            ) from e
