"""
Explicit input validation for user operations.

Every service entry point runs its payload through one of these functions
first, so callers outside the HTTP layer get the same checks and the same
structured failure listing every violated rule.
"""

import re
from typing import Any, Mapping, Sequence, Union

from pydantic import ValidationError

from user_directory.core.exceptions import InvalidUserInput
from user_directory.schemas.user import UserCreate, UserUpdate

SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'
MIN_PASSWORD_LENGTH = 8

_PASSWORD_RULES = (
    ("uppercase letter", re.compile(r"[A-Z]")),
    ("lowercase letter", re.compile(r"[a-z]")),
    ("number", re.compile(r"\d")),
    ("special character", re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")),
)


def password_violations(password: str) -> list[str]:
    """
    Check a password against the length and complexity rules.

    Args:
        password: Plain text password

    Returns:
        Names of the unmet rules; empty when the password is strong
    """
    missing = []
    if len(password) < MIN_PASSWORD_LENGTH:
        missing.append(f"at least {MIN_PASSWORD_LENGTH} characters")
    missing.extend(name for name, pattern in _PASSWORD_RULES if not pattern.search(password))
    return missing


def is_password_strong(password: str) -> bool:
    return not password_violations(password)


def violations_from_errors(errors: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Flatten Pydantic error dicts into ``{"field", "message", "type"}`` entries."""
    violations = []
    for error in errors:
        loc = list(error["loc"])
        # request body errors are reported relative to the payload
        if loc and loc[0] == "body":
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "__root__"
        violations.append({"field": field, "message": error["msg"], "type": error["type"]})
    return violations


def validate_user_create(data: Union[UserCreate, Mapping[str, Any]]) -> UserCreate:
    """
    Validate a user creation payload.

    Args:
        data: A ``UserCreate`` or a raw mapping (camelCase or snake_case keys)

    Returns:
        Validated ``UserCreate``

    Raises:
        InvalidUserInput: Listing every violated field rule
    """
    if isinstance(data, UserCreate):
        return data
    try:
        return UserCreate.model_validate(data)
    except ValidationError as e:
        raise InvalidUserInput(violations_from_errors(e.errors())) from e


def validate_user_update(data: Union[UserUpdate, Mapping[str, Any]]) -> UserUpdate:
    """
    Validate a partial update payload.

    Raises:
        InvalidUserInput: Listing every violated field rule
    """
    if isinstance(data, UserUpdate):
        return data
    try:
        return UserUpdate.model_validate(data)
    except ValidationError as e:
        raise InvalidUserInput(violations_from_errors(e.errors())) from e
