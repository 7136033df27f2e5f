"""
PhotoShare Backend - Password Hashing & Access Tokens
=======================================================

What:  bcrypt hashing through passlib and HS256 JWTs through PyJWT.
How:   Tokens carry user_id, email and username and expire after
       `settings.jwt_expire_days`. They are stateless: logout is a client
       concern, and every request re-reads the user row so a deleted
       account is locked out immediately.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from photoshare.config import settings
from photoshare.exceptions import UnauthenticatedError

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: int, email: str, username: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "user_id": user_id,
        "email": email,
        "username": username,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        UnauthenticatedError: expired, malformed, or missing the user_id claim
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("AUTH.TOKEN_EXPIRED")
    except jwt.InvalidTokenError as e:
        raise UnauthenticatedError("AUTH.INVALID_TOKEN", context={"reason": str(e)})

    if not isinstance(payload.get("user_id"), int):
        raise UnauthenticatedError("AUTH.INVALID_TOKEN", context={"reason": "missing user_id"})
    return payload
