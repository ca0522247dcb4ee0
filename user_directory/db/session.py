"""
Database session management using SQLModel.
Provides the engine and the per-request session dependency.
"""

from pathlib import Path
from typing import Generator

from sqlalchemy.engine import make_url
from sqlmodel import Session, SQLModel, create_engine

from user_directory.core.config import settings

if settings.is_sqlite:
    engine = create_engine(
        settings.SQLALCHEMY_DATABASE_URI,
        echo=settings.DEBUG,
        connect_args={"check_same_thread": False},  # FastAPI serves sync routes from a threadpool
    )
else:
    # pool_pre_ping drops connections the server has closed
    engine = create_engine(
        settings.SQLALCHEMY_DATABASE_URI,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def init_db() -> None:
    """Create all tables that do not exist yet."""
    if settings.is_sqlite:
        database = make_url(settings.SQLALCHEMY_DATABASE_URI).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    # Registers the users table on SQLModel.metadata
    from user_directory.models import user  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session for FastAPI routes.

    Yields:
        Database session instance
    """
    with Session(engine) as session:
        yield session
