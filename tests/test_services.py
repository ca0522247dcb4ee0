"""
Tests for the user directory service.
"""

from datetime import date

import pytest
from sqlmodel import Session

from user_directory.core.exceptions import (
    DuplicateEmailError,
    InvalidUserInput,
    UserNotFoundError,
    WeakPasswordError,
)
from user_directory.core.security import verify_password
from user_directory.models.user import User, UserRole
from user_directory.schemas.user import UserAuthRecord, UserCreate, UserResponse
from user_directory.services.user_service import UserService

TEST_PASSWORD = "SecurePass123!"


def test_create_user(user_service: UserService, user_payload: dict) -> None:
    """Test user creation with defaults applied."""
    user = user_service.create(user_payload)

    assert user.id is not None
    assert user.first_name == "John"
    assert user.last_name == "Doe"
    assert user.email == "john.doe@example.com"
    assert user.roles == [UserRole.USER]
    assert user.is_active is True
    assert user.date_of_birth == date(1990, 1, 1)
    assert user.phone_number == "+1234567890"
    assert user.created_at is not None
    assert user.updated_at is not None
    assert isinstance(user, UserResponse)
    assert "password" not in user.model_dump()
    assert "hashed_password" not in user.model_dump()


def test_create_accepts_schema_instance(user_service: UserService) -> None:
    user_in = UserCreate(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        password=TEST_PASSWORD,
        roles=[UserRole.ADMIN, UserRole.MODERATOR, UserRole.ADMIN],
    )
    user = user_service.create(user_in)
    assert user.roles == [UserRole.ADMIN, UserRole.MODERATOR]


def test_create_stores_hash_not_plaintext(user_service: UserService, session: Session, test_user: UserResponse) -> None:
    row = session.get(User, test_user.id)
    assert row is not None
    assert row.hashed_password != TEST_PASSWORD
    assert verify_password(TEST_PASSWORD, row.hashed_password)


def test_create_then_find_one_matches(user_service: UserService, user_payload: dict) -> None:
    created = user_service.create(user_payload)
    found = user_service.find_one(created.id)
    assert found == created
    assert "hashed_password" not in found.model_dump()


def test_create_duplicate_email(user_service: UserService, user_payload: dict, test_user: UserResponse) -> None:
    """Duplicate email is rejected and nothing new is stored."""
    with pytest.raises(DuplicateEmailError) as exc_info:
        user_service.create({**user_payload, "firstName": "Jane"})
    assert exc_info.value.message == "User with this email already exists"
    assert len(user_service.find_all()) == 1


def test_create_duplicate_email_is_case_insensitive(user_service: UserService) -> None:
    base = {"firstName": "Alice", "lastName": "Smith", "password": TEST_PASSWORD}
    user_service.create({**base, "email": "a@x.com"})

    with pytest.raises(DuplicateEmailError):
        user_service.create({**base, "firstName": "Bob", "email": "A@X.com"})

    users = user_service.find_all()
    assert len(users) == 1
    assert users[0].email == "a@x.com"


def test_create_weak_password(user_service: UserService, user_payload: dict) -> None:
    with pytest.raises(WeakPasswordError) as exc_info:
        user_service.create({**user_payload, "password": "weak"})
    assert exc_info.value.missing == ["at least 8 characters", "uppercase letter", "number", "special character"]
    assert user_service.find_all() == []


def test_create_weak_password_missing_classes(user_service: UserService, user_payload: dict) -> None:
    with pytest.raises(WeakPasswordError) as exc_info:
        user_service.create({**user_payload, "password": "alllowercase"})
    assert exc_info.value.missing == ["uppercase letter", "number", "special character"]
    assert user_service.find_all() == []


def test_create_strong_password_succeeds(user_service: UserService, user_payload: dict) -> None:
    user = user_service.create({**user_payload, "password": "SecurePass123!"})
    assert user.id is not None


def test_create_reports_every_violation(user_service: UserService) -> None:
    with pytest.raises(InvalidUserInput) as exc_info:
        user_service.create(
            {
                "firstName": "J",
                "lastName": "",
                "email": "not-an-email",
                "password": "short",
                "roles": ["superuser"],
            }
        )
    fields = {v["field"] for v in exc_info.value.violations}
    assert {"firstName", "lastName", "email"} <= fields
    assert "password" not in fields
    assert any(field.startswith("roles") for field in fields)


def test_find_all_in_insertion_order(user_service: UserService) -> None:
    for i, name in enumerate(["Anna", "Boris", "Carla"]):
        user_service.create(
            {"firstName": name, "lastName": "Tester", "email": f"user{i}@example.com", "password": TEST_PASSWORD}
        )
    first = [u.first_name for u in user_service.find_all()]
    second = [u.first_name for u in user_service.find_all()]
    assert first == ["Anna", "Boris", "Carla"]
    assert first == second


def test_find_by_active_status(user_service: UserService, test_user: UserResponse) -> None:
    other = user_service.create(
        {"firstName": "Jane", "lastName": "Roe", "email": "jane@example.com", "password": TEST_PASSWORD}
    )
    user_service.deactivate(other.id)

    active = user_service.find_by_active_status(True)
    inactive = user_service.find_by_active_status(False)
    assert [u.id for u in active] == [test_user.id]
    assert [u.id for u in inactive] == [other.id]


def test_find_one_not_found(user_service: UserService) -> None:
    with pytest.raises(UserNotFoundError) as exc_info:
        user_service.find_one(999)
    assert exc_info.value.message == "User with ID 999 not found"


def test_find_by_email(user_service: UserService, test_user: UserResponse) -> None:
    user = user_service.find_by_email("JOHN.DOE@example.com")
    assert user is not None
    assert user.id == test_user.id
    assert user_service.find_by_email("nobody@example.com") is None


def test_find_by_email_for_auth_includes_hash(user_service: UserService, test_user: UserResponse) -> None:
    record = user_service.find_by_email_for_auth(test_user.email)
    assert isinstance(record, UserAuthRecord)
    assert verify_password(TEST_PASSWORD, record.hashed_password)
    assert user_service.find_by_email_for_auth("nobody@example.com") is None


def test_update_changes_only_given_field(user_service: UserService, test_user: UserResponse) -> None:
    updated = user_service.update(test_user.id, {"firstName": "Jane"})

    assert updated.first_name == "Jane"
    assert updated.updated_at > test_user.updated_at
    unchanged = {"first_name", "updated_at"}
    assert updated.model_dump(exclude=unchanged) == test_user.model_dump(exclude=unchanged)


def test_update_not_found(user_service: UserService) -> None:
    with pytest.raises(UserNotFoundError):
        user_service.update(42, {"firstName": "Jane"})


def test_update_duplicate_email(user_service: UserService, test_user: UserResponse) -> None:
    other = user_service.create(
        {"firstName": "Jane", "lastName": "Roe", "email": "jane@example.com", "password": TEST_PASSWORD}
    )
    with pytest.raises(DuplicateEmailError):
        user_service.update(other.id, {"email": "John.Doe@Example.com"})
    assert user_service.find_one(other.id).email == "jane@example.com"


def test_update_same_email_is_allowed(user_service: UserService, test_user: UserResponse) -> None:
    updated = user_service.update(test_user.id, {"email": "JOHN.DOE@EXAMPLE.COM", "lastName": "Smith"})
    assert updated.email == "john.doe@example.com"
    assert updated.last_name == "Smith"


def test_update_password_is_rehashed(user_service: UserService, test_user: UserResponse) -> None:
    updated = user_service.update(test_user.id, {"password": "An0ther!Secret"})
    assert "password" not in updated.model_dump()
    assert user_service.authenticate(test_user.email, "An0ther!Secret") is not None
    assert user_service.authenticate(test_user.email, TEST_PASSWORD) is None


def test_update_weak_password(user_service: UserService, test_user: UserResponse) -> None:
    with pytest.raises(WeakPasswordError):
        user_service.update(test_user.id, {"password": "nouppercase1!"})


def test_update_short_password(user_service: UserService, test_user: UserResponse) -> None:
    with pytest.raises(WeakPasswordError) as exc_info:
        user_service.update(test_user.id, {"password": "Ab1!"})
    assert exc_info.value.missing == ["at least 8 characters"]
    assert user_service.authenticate(test_user.email, TEST_PASSWORD) is not None


def test_update_rejects_immutable_and_empty_fields(user_service: UserService, test_user: UserResponse) -> None:
    with pytest.raises(InvalidUserInput) as exc_info:
        user_service.update(test_user.id, {"id": 5, "createdAt": "2020-01-01T00:00:00", "roles": []})
    fields = {v["field"] for v in exc_info.value.violations}
    assert {"id", "createdAt", "roles"} <= fields


def test_update_rejects_null_for_required_field(user_service: UserService, test_user: UserResponse) -> None:
    with pytest.raises(InvalidUserInput):
        user_service.update(test_user.id, {"email": None})


def test_update_roles(user_service: UserService, test_user: UserResponse) -> None:
    updated = user_service.update(test_user.id, {"roles": ["moderator", "admin"]})
    assert updated.roles == [UserRole.MODERATOR, UserRole.ADMIN]


def test_remove(user_service: UserService, test_user: UserResponse) -> None:
    assert user_service.remove(test_user.id) is None
    with pytest.raises(UserNotFoundError):
        user_service.find_one(test_user.id)


def test_remove_not_found(user_service: UserService) -> None:
    with pytest.raises(UserNotFoundError):
        user_service.remove(123)


def test_deactivate_then_activate(user_service: UserService, test_user: UserResponse) -> None:
    deactivated = user_service.deactivate(test_user.id)
    assert deactivated.is_active is False
    assert deactivated.updated_at > test_user.updated_at

    activated = user_service.activate(test_user.id)
    assert activated.is_active is True
    assert activated.updated_at > deactivated.updated_at

    volatile = {"is_active", "updated_at"}
    assert activated.model_dump(exclude=volatile) == test_user.model_dump(exclude=volatile)


def test_toggle_not_found(user_service: UserService) -> None:
    with pytest.raises(UserNotFoundError):
        user_service.deactivate(7)
    with pytest.raises(UserNotFoundError):
        user_service.activate(7)


def test_authenticate(user_service: UserService, test_user: UserResponse) -> None:
    user = user_service.authenticate("john.doe@example.com", TEST_PASSWORD)
    assert user is not None
    assert user.id == test_user.id
    assert "hashed_password" not in user.model_dump()


def test_authenticate_wrong_password(user_service: UserService, test_user: UserResponse) -> None:
    assert user_service.authenticate(test_user.email, "WrongPass123!") is None


def test_authenticate_inactive_user(user_service: UserService, test_user: UserResponse) -> None:
    user_service.deactivate(test_user.id)
    assert user_service.authenticate(test_user.email, TEST_PASSWORD) is None


def test_authenticate_unknown_user(user_service: UserService) -> None:
    assert user_service.authenticate("nobody@example.com", TEST_PASSWORD) is None
