from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from user_directory.core.exceptions import DuplicateEmailError
from user_directory.core.logging import get_logger
from user_directory.models.user import User

logger = get_logger(__name__)


class UserRepository:
    """Data-access layer for users."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: int) -> Optional[User]:
        return self._session.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == email)
        return self._session.exec(statement).first()

    def find_all(self, is_active: Optional[bool] = None) -> List[User]:
        statement = select(User)
        if is_active is not None:
            statement = statement.where(User.is_active == is_active)
        statement = statement.order_by(User.id)  # type: ignore[arg-type]
        return list(self._session.exec(statement))

    def add(self, user: User) -> User:
        """Insert a new row and return it with its generated id."""
        return self._commit(user)

    def save(self, user: User) -> User:
        """Persist changes to an existing row."""
        return self._commit(user)

    def delete(self, user_id: int) -> int:
        """Delete by id and return the number of rows affected."""
        user = self._session.get(User, user_id)
        if user is None:
            return 0
        self._session.delete(user)
        try:
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        return 1

    def _commit(self, user: User) -> User:
        email = user.email
        self._session.add(user)
        try:
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            # The unique index on email backs up the service-level check
            if "email" in str(e.orig).lower():
                logger.warning(f"Unique constraint rejected email: {email}")
                raise DuplicateEmailError(email) from e
            raise
        except Exception:
            self._session.rollback()
            raise
        self._session.refresh(user)
        return user
