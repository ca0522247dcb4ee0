"""
Token schemas for the bearer login flow.
"""

from typing import Optional

from pydantic import BaseModel


class Token(BaseModel):
    """Access token issued by ``/auth/login``."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenPayload(BaseModel):
    """Claims read from an access token; expiry is checked by ``jwt.decode``."""

    sub: Optional[int] = None
