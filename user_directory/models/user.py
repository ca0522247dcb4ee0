"""
User model with role-based access control.
Roles are stored as a JSON list on the row.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    """User role enumeration for RBAC."""

    USER = "user"
    ADMIN = "admin"
    MODERATOR = "moderator"


DEFAULT_ROLES: List[str] = [UserRole.USER.value]


class User(SQLModel, table=True):
    """
    User account row.

    Attributes:
        id: Primary key, assigned by the database
        first_name: Given name
        last_name: Family name
        email: Unique, lower-cased email address (used for login)
        hashed_password: One-way password hash, never returned publicly
        roles: Non-empty list of role labels
        date_of_birth: Optional date of birth
        phone_number: Optional phone number
        is_active: Whether the account is active
        created_at: Timestamp of account creation
        updated_at: Timestamp of last mutation
    """

    __tablename__ = "users"  # type: ignore
    # ids are never reused after deletion
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(unique=True, index=True, max_length=255)
    hashed_password: str = Field(max_length=255)
    roles: List[str] = Field(default_factory=lambda: list(DEFAULT_ROLES), sa_column=Column(JSON, nullable=False))
    date_of_birth: Optional[date] = Field(default=None)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
