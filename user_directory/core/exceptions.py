"""
Domain errors raised by the user directory.
The HTTP layer maps each one to its own status code.
"""

from typing import Any, Optional


class UserDirectoryError(Exception):
    """Base exception for user directory errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateEmailError(UserDirectoryError):
    """Raised when another user already holds the email"""

    def __init__(self, email: str):
        super().__init__("User with this email already exists")
        self.email = email


class WeakPasswordError(UserDirectoryError):
    """Raised when a password misses one or more required character classes"""

    def __init__(self, missing: list[str]):
        super().__init__(
            "Password must contain at least one uppercase letter, one lowercase letter, "
            "one number, and one special character"
        )
        self.missing = missing


class UserNotFoundError(UserDirectoryError):
    """Raised when a mandatory lookup finds no user"""

    def __init__(self, user_id: Optional[int] = None, email: Optional[str] = None):
        if user_id is not None:
            message = f"User with ID {user_id} not found"
        else:
            message = "User not found"
        super().__init__(message)
        self.user_id = user_id
        self.email = email


class InvalidUserInput(UserDirectoryError):
    """Raised when input fails field validation; carries every violated rule"""

    def __init__(self, violations: list[dict[str, Any]]):
        super().__init__("Validation failed")
        self.violations = violations
