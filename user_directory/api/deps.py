"""
API dependencies for FastAPI dependency injection.
Assembles the user service per request and resolves the bearer token.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlmodel import Session

from user_directory.core.config import settings
from user_directory.core.exceptions import UserNotFoundError
from user_directory.core.logging import get_logger
from user_directory.core.security import decode_access_token
from user_directory.db.session import get_session
from user_directory.repositories.user_repository import UserRepository
from user_directory.schemas.token import TokenPayload
from user_directory.schemas.user import UserResponse
from user_directory.services.user_service import UserService

logger = get_logger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/login")


def get_user_service(session: Annotated[Session, Depends(get_session)]) -> UserService:
    """Build the user service on top of the request's database session."""
    return UserService(UserRepository(session))


UserServiceDep = Annotated[UserService, Depends(get_user_service)]


def get_current_user(
    service: UserServiceDep,
    token: Annotated[str, Depends(oauth2_scheme)],
) -> UserResponse:
    """
    Dependency to get the current authenticated user from JWT token.

    Raises:
        HTTPException: 401 if the token is invalid or the user is gone,
            403 if the account is inactive
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
        user_id: str | None = payload.get("sub")
        if user_id is None:
            logger.warning("Token missing subject claim")
            raise credentials_exception
        token_data = TokenPayload(sub=int(user_id))
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise credentials_exception
    except ValueError:
        logger.warning("Invalid user ID in token")
        raise credentials_exception

    try:
        user = service.find_one(token_data.sub)  # type: ignore[arg-type]
    except UserNotFoundError:
        logger.warning(f"User {token_data.sub} not found")
        raise credentials_exception
    if not user.is_active:
        logger.warning(f"Inactive user {user.id} attempted access")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")

    return user
