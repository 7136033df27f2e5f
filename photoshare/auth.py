"""
PhotoShare Backend - Authentication Dependencies
==================================================

What:  FastAPI dependencies resolving the caller from `Authorization: Bearer`.
How:   The JWT is verified, then its user is re-read from the database; a
       token for a missing or soft-deleted user is rejected with 401.

    get_current_user           → User, or 401
    get_current_user_optional  → User or None (public endpoints that adapt
                                 to the caller, e.g. private photo access)
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.database import get_db_session
from photoshare.exceptions import UnauthenticatedError
from photoshare.models import User
from photoshare.services.access import get_active_user
from photoshare.services.security import decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False: a missing header becomes our own localized 401
bearer_scheme = HTTPBearer(auto_error=False)


async def _resolve_user(db: AsyncSession, token: str) -> User:
    payload = decode_access_token(token)
    user = await get_active_user(db, payload["user_id"])
    if user is None:
        raise UnauthenticatedError("AUTH.USER_NOT_FOUND", context={"user_id": payload["user_id"]})
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None:
        raise UnauthenticatedError()
    return await _resolve_user(db, credentials.credentials)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    """Anonymous when no or an unusable token is sent."""
    if credentials is None:
        return None
    try:
        return await _resolve_user(db, credentials.credentials)
    except UnauthenticatedError as e:
        logger.debug("Ignoring unusable token on optional-auth route: %s", e.message_key)
        return None
