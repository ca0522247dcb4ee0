"""
User service layer implementing business logic for user operations.
Separates business logic from API routes and database operations.

Every value handed back to a caller passes through ``to_public`` so the
password hash never leaves this module, except via ``find_by_email_for_auth``.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, List, Mapping, Optional, Union

from user_directory.core.exceptions import DuplicateEmailError, UserNotFoundError, WeakPasswordError
from user_directory.core.logging import get_logger
from user_directory.core.security import get_password_hash, verify_password
from user_directory.models.user import DEFAULT_ROLES, User, utcnow
from user_directory.repositories.user_repository import UserRepository
from user_directory.schemas.user import UserAuthRecord, UserCreate, UserResponse, UserUpdate, normalize_email
from user_directory.services.validation import password_violations, validate_user_create, validate_user_update

logger = get_logger(__name__)


def to_public(user: User) -> UserResponse:
    """Strip password data from a stored user."""
    return UserResponse.model_validate(user)


def _next_timestamp(previous: Optional[datetime]) -> datetime:
    # updated_at must move forward on every mutation, even within one clock tick
    now = utcnow()
    if previous is not None:
        if previous.tzinfo is None:
            previous = previous.replace(tzinfo=timezone.utc)
        if now <= previous:
            now = previous + timedelta(microseconds=1)
    return now


class UserService:
    """
    Service for managing the user directory.
    Coordinates validation, password hashing, and the user repository.
    """

    def __init__(self, repository: UserRepository):
        self.repository = repository

    def create(self, user_in: Union[UserCreate, Mapping[str, Any]]) -> UserResponse:
        """
        Create a new user with a hashed password.

        Args:
            user_in: User creation data

        Returns:
            The created user, without password data

        Raises:
            InvalidUserInput: If any field rule is violated
            DuplicateEmailError: If the email is already registered
            WeakPasswordError: If the password misses a required character class
        """
        user_create = validate_user_create(user_in)

        if self.repository.get_by_email(user_create.email) is not None:
            logger.warning(f"Rejected user creation with existing email: {user_create.email}")
            raise DuplicateEmailError(user_create.email)

        missing = password_violations(user_create.password)
        if missing:
            raise WeakPasswordError(missing)

        now = utcnow()
        user = User(
            first_name=user_create.first_name,
            last_name=user_create.last_name,
            email=user_create.email,
            hashed_password=get_password_hash(user_create.password),
            roles=[role.value for role in user_create.roles] if user_create.roles else list(DEFAULT_ROLES),
            date_of_birth=user_create.date_of_birth,
            phone_number=user_create.phone_number,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        user = self.repository.add(user)
        logger.info(f"Created user {user.id} ({user.email})")
        return to_public(user)

    def find_all(self) -> List[UserResponse]:
        """Return every user in insertion order."""
        return [to_public(user) for user in self.repository.find_all()]

    def find_by_active_status(self, active: bool) -> List[UserResponse]:
        return [to_public(user) for user in self.repository.find_all(is_active=active)]

    def find_one(self, user_id: int) -> UserResponse:
        """
        Get a user by ID.

        Raises:
            UserNotFoundError: If no user has this ID
        """
        return to_public(self._get_or_raise(user_id))

    def find_by_email(self, email: str) -> Optional[UserResponse]:
        """Look up a user by email, case-insensitively. Returns None when absent."""
        user = self.repository.get_by_email(normalize_email(email))
        return to_public(user) if user is not None else None

    def find_by_email_for_auth(self, email: str) -> Optional[UserAuthRecord]:
        """
        Look up a user including the password hash.
        Only the authentication flow may call this.
        """
        user = self.repository.get_by_email(normalize_email(email))
        return UserAuthRecord.model_validate(user) if user is not None else None

    def update(self, user_id: int, user_in: Union[UserUpdate, Mapping[str, Any]]) -> UserResponse:
        """
        Apply a partial update.

        Args:
            user_id: ID of the user to update
            user_in: Fields to overwrite; omitted fields keep their values

        Returns:
            The updated user, without password data

        Raises:
            InvalidUserInput: If any supplied field is invalid
            UserNotFoundError: If no user has this ID
            DuplicateEmailError: If the new email belongs to another user
            WeakPasswordError: If a new password misses a required character class
        """
        user_update = validate_user_update(user_in)
        user = self._get_or_raise(user_id)

        changes = user_update.model_dump(exclude_unset=True)

        new_email = changes.get("email")
        if new_email is not None and new_email != user.email:
            holder = self.repository.get_by_email(new_email)
            if holder is not None and holder.id != user.id:
                logger.warning(f"Rejected email change for user {user_id}: {new_email} already in use")
                raise DuplicateEmailError(new_email)

        if "password" in changes:
            password = changes.pop("password")
            missing = password_violations(password)
            if missing:
                raise WeakPasswordError(missing)
            changes["hashed_password"] = get_password_hash(password)

        if "roles" in changes:
            changes["roles"] = [role.value for role in user_update.roles or []]

        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = _next_timestamp(user.updated_at)

        user = self.repository.save(user)
        logger.info(f"Updated user {user_id} (fields: {', '.join(sorted(changes)) or 'none'})")
        return to_public(user)

    def remove(self, user_id: int) -> None:
        """
        Delete a user.

        Raises:
            UserNotFoundError: If no row was deleted
        """
        if self.repository.delete(user_id) == 0:
            raise UserNotFoundError(user_id=user_id)
        logger.info(f"Deleted user {user_id}")

    def deactivate(self, user_id: int) -> UserResponse:
        return self._set_active(user_id, False)

    def activate(self, user_id: int) -> UserResponse:
        return self._set_active(user_id, True)

    def authenticate(self, email: str, password: str) -> Optional[UserResponse]:
        """
        Authenticate a user by email and password.

        Args:
            email: User's email
            password: Plain text password

        Returns:
            The user if the password matches and the account is active, None otherwise
        """
        record = self.find_by_email_for_auth(email)
        if record is None:
            return None
        if not verify_password(password, record.hashed_password):
            return None
        if not record.is_active:
            return None
        return UserResponse.model_validate(record.model_dump(exclude={"hashed_password"}))

    def _get_or_raise(self, user_id: int) -> User:
        user = self.repository.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id=user_id)
        return user

    def _set_active(self, user_id: int, active: bool) -> UserResponse:
        user = self._get_or_raise(user_id)
        user.is_active = active
        user.updated_at = _next_timestamp(user.updated_at)
        user = self.repository.save(user)
        logger.info(f"{'Activated' if active else 'Deactivated'} user {user_id}")
        return to_public(user)
