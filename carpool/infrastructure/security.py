"""
Password hashing and JWT access tokens.

* Hashes use passlib's bcrypt scheme; the stored value is never returned
  by the API.
* Tokens are HS256 JWTs with ``sub`` set to the user id (as a string, as
  PyJWT requires) and an ``exp`` claim ``access_token_expire_days`` ahead.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from carpool.config import settings
from carpool.domain.errors import Unauthenticated

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return _pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: int, email: str, expires_delta: timedelta | None = None
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.access_token_expire_days)
    )
    payload = {"sub": str(user_id), "email": email, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """Return the user id carried by *token* or raise ``Unauthenticated``."""
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token expirado")
    except jwt.InvalidTokenError:
        raise Unauthenticated("Token inválido")

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise Unauthenticated("Token inválido")
    return int(subject)
