"""
PhotoShare Backend - Authentication Service
=============================================

What:  Registration and login.
How:   Emails are stored lowercase and are unique across all accounts,
       soft-deleted ones included, so a deleted account's email cannot be
       re-registered. Login failures never say which half was wrong.
"""

import logging
from typing import Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.config import settings
from photoshare.exceptions import ConflictError, UnauthenticatedError, ValidationError
from photoshare.models import User
from photoshare.services.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:

    async def register(self, db: AsyncSession, username: str, email: str, password: str) -> User:
        """
        Raises:
            ValidationError: password shorter than settings.password_min_length
            ConflictError:   email already registered
        """
        if len(password) < settings.password_min_length:
            raise ValidationError(
                "AUTH.PASSWORD_TOO_SHORT",
                field="password",
                min_length=settings.password_min_length,
            )

        if await self._find_by_email(db, email) is not None:
            raise ConflictError("AUTH.EMAIL_ALREADY_EXISTS", context={"email": email})

        user = User(username=username, email=email, password_hash=hash_password(password))
        try:
            async with db.begin_nested():
                db.add(user)
        except IntegrityError:
            raise ConflictError("AUTH.EMAIL_ALREADY_EXISTS", context={"email": email})

        logger.info("User %s registered", user.id)
        return user

    async def login(self, db: AsyncSession, email: str, password: str) -> Tuple[User, str]:
        """Returns the user and a fresh access token."""
        user = await self._find_by_email(db, email)
        if user is None or user.is_deleted or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise UnauthenticatedError("AUTH.INVALID_CREDENTIALS")

        token = create_access_token(user.id, user.email, user.username)
        logger.info("User %s logged in", user.id)
        return user, token

    async def _find_by_email(self, db: AsyncSession, email: str):
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


auth_service = AuthService()
