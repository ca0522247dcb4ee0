"""
Password hashing and bearer tokens for directory accounts.

Stored credentials are ``pbkdf2_sha256`` hashes; ``bcrypt`` hashes are still
accepted on verify so imported accounts can sign in.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt
from passlib.context import CryptContext

from user_directory.core.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")


def create_access_token(subject: str | Any, expires_delta: timedelta | None = None) -> str:
    """
    Sign a bearer token for a user.

    Args:
        subject: User id stored in the ``sub`` claim
        expires_delta: Lifetime override; defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``

    Returns:
        Compact JWT
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {"exp": datetime.now(timezone.utc) + lifetime, "sub": str(subject)}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Return the claims of a token issued by :func:`create_access_token`.

    Raises:
        jose.JWTError: Bad signature or expired token
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login attempt against the stored hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    # salted, so two users with the same password get different hashes
    return pwd_context.hash(password)
