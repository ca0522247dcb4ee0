"""
Authentication routes.
Provides OAuth2 password login returning a JWT bearer token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from user_directory.api.deps import UserServiceDep
from user_directory.core.config import settings
from user_directory.core.logging import get_logger
from user_directory.core.security import create_access_token
from user_directory.schemas.token import Token

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=Token)
def login(
    service: UserServiceDep,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
) -> Token:
    """
    OAuth2 compatible token login.

    Args:
        service: User directory service
        form_data: OAuth2 form with username (email) and password

    Returns:
        Access token

    Raises:
        HTTPException: If credentials are invalid or the account is inactive
    """
    user = service.authenticate(email=form_data.username, password=form_data.password)
    if not user:
        logger.warning(f"Failed login attempt for email: {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(subject=user.id)
    logger.info(f"User logged in: {user.email} (ID: {user.id})")

    return Token(
        access_token=access_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
