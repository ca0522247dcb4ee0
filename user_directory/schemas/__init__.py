"""Pydantic schemas for request/response validation."""

from user_directory.schemas.token import Token, TokenPayload
from user_directory.schemas.user import UserAuthRecord, UserCreate, UserResponse, UserUpdate

__all__ = ["Token", "TokenPayload", "UserAuthRecord", "UserCreate", "UserResponse", "UserUpdate"]
