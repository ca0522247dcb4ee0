"""
User schemas for API request/response validation.
Separates internal models from API contracts using Pydantic.

Wire names are camelCase (``firstName``); snake_case is accepted on input too.
"""

from datetime import date, datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from user_directory.models.user import UserRole

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
# Minimum length and complexity live in services.validation.password_violations
PasswordStr = Annotated[str, StringConstraints(max_length=128)]
PhoneStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=20)]


def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively; this is the canonical stored form."""
    return email.strip().lower()


def _unique_roles(roles: Optional[List[UserRole]]) -> Optional[List[UserRole]]:
    if roles is None:
        return None
    return list(dict.fromkeys(roles))


class _InputModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class UserCreate(_InputModel):
    """Schema for user creation."""

    first_name: NameStr
    last_name: NameStr
    email: EmailStr
    password: PasswordStr
    roles: Optional[List[UserRole]] = Field(default=None, min_length=1)
    date_of_birth: Optional[date] = None
    phone_number: Optional[PhoneStr] = None

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("roles", mode="after")
    @classmethod
    def dedupe_roles(cls, v: Optional[List[UserRole]]) -> Optional[List[UserRole]]:
        return _unique_roles(v)


class UserUpdate(_InputModel):
    """
    Schema for partial user updates.
    Only fields present in the payload are applied; ``id`` and ``createdAt``
    are rejected as unknown fields.
    """

    first_name: Optional[NameStr] = None
    last_name: Optional[NameStr] = None
    email: Optional[EmailStr] = None
    password: Optional[PasswordStr] = None
    roles: Optional[List[UserRole]] = Field(default=None, min_length=1)
    date_of_birth: Optional[date] = None
    phone_number: Optional[PhoneStr] = None
    is_active: Optional[bool] = None

    @field_validator("first_name", "last_name", "email", "password", "roles", "is_active", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return normalize_email(v) if v is not None else None

    @field_validator("roles", mode="after")
    @classmethod
    def dedupe_roles(cls, v: Optional[List[UserRole]]) -> Optional[List[UserRole]]:
        return _unique_roles(v)


class UserResponse(BaseModel):
    """
    Public-safe view of a user.
    Never carries password data.
    """

    id: int
    first_name: str
    last_name: str
    email: str
    roles: List[UserRole]
    date_of_birth: Optional[date] = None
    phone_number: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class UserAuthRecord(UserResponse):
    """Full user record for the authentication path only; includes the password hash."""

    hashed_password: str
