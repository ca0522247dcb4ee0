"""
User routes for directory management operations.
Domain errors raised by the service are mapped to HTTP status codes by the
application's exception handlers.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from user_directory.api.deps import UserServiceDep, get_current_user
from user_directory.schemas.user import UserCreate, UserResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user_in: UserCreate, service: UserServiceDep) -> UserResponse:
    """
    Create a new user.

    Returns 409 if the email is taken and 400 if the password is weak.
    """
    return service.create(user_in)


@router.get("", response_model=List[UserResponse])
def list_users(service: UserServiceDep, active: Optional[bool] = None) -> List[UserResponse]:
    """
    List all users, optionally filtered by active status.

    Args:
        active: When given, only users whose ``isActive`` matches are returned
    """
    if active is not None:
        return service.find_by_active_status(active)
    return service.find_all()


@router.get("/me", response_model=UserResponse)
def get_current_user_profile(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
) -> UserResponse:
    """Get the profile of the user the bearer token belongs to."""
    return current_user


@router.get("/email/{email}", response_model=UserResponse)
def get_user_by_email(email: str, service: UserServiceDep) -> UserResponse:
    user = service.find_by_email(email)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, service: UserServiceDep) -> UserResponse:
    return service.find_one(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, user_in: UserUpdate, service: UserServiceDep) -> UserResponse:
    """
    Update a user. Only fields present in the body are changed.
    """
    return service.update(user_id, user_in)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, service: UserServiceDep) -> Response:
    service.remove(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{user_id}/deactivate", response_model=UserResponse)
def deactivate_user(user_id: int, service: UserServiceDep) -> UserResponse:
    """Deactivate a user account."""
    return service.deactivate(user_id)


@router.patch("/{user_id}/activate", response_model=UserResponse)
def activate_user(user_id: int, service: UserServiceDep) -> UserResponse:
    """Activate a user account."""
    return service.activate(user_id)
