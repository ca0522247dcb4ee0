"""
Main FastAPI application entry point.
Configures the application, middleware, error mapping, and routes.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session

from user_directory.api.routes import auth, health, users
from user_directory.core.config import settings
from user_directory.core.exceptions import (
    DuplicateEmailError,
    InvalidUserInput,
    UserDirectoryError,
    UserNotFoundError,
    WeakPasswordError,
)
from user_directory.core.logging import get_logger, setup_logging
from user_directory.db.session import engine, init_db
from user_directory.models.user import UserRole
from user_directory.repositories.user_repository import UserRepository
from user_directory.services.user_service import UserService
from user_directory.services.validation import violations_from_errors

setup_logging()
logger = get_logger(__name__)


def bootstrap_admin() -> None:
    """Create the first admin account if it does not exist yet."""
    with Session(engine) as session:
        service = UserService(UserRepository(session))
        if service.find_by_email(settings.FIRST_SUPERUSER_EMAIL) is not None:
            return
        logger.info("Creating first admin user...")
        try:
            service.create(
                {
                    "first_name": "Admin",
                    "last_name": "User",
                    "email": settings.FIRST_SUPERUSER_EMAIL,
                    "password": settings.FIRST_SUPERUSER_PASSWORD,
                    "roles": [UserRole.ADMIN],
                }
            )
            logger.info(f"Admin user created: {settings.FIRST_SUPERUSER_EMAIL}")
        except UserDirectoryError as e:
            logger.error(f"Failed to create admin user: {e.message}")
            logger.warning("Continuing without admin user.")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.
    Runs startup and shutdown logic.
    """
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")

    logger.info("Creating database tables...")
    init_db()

    if not settings.DISABLE_BOOTSTRAP_USERS:
        bootstrap_admin()
    else:
        logger.info("User bootstrapping disabled (DISABLE_BOOTSTRAP_USERS=true)")

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="User management with email uniqueness, password strength rules, and bearer login.",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    lifespan=lifespan,
)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["authorization", "content-type", "accept"],
    )


@app.exception_handler(DuplicateEmailError)
async def duplicate_email_handler(request: Request, exc: DuplicateEmailError) -> JSONResponse:
    return JSONResponse({"detail": exc.message}, status_code=status.HTTP_409_CONFLICT)


@app.exception_handler(WeakPasswordError)
async def weak_password_handler(request: Request, exc: WeakPasswordError) -> JSONResponse:
    return JSONResponse(
        {"detail": exc.message, "missing": exc.missing},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.exception_handler(UserNotFoundError)
async def user_not_found_handler(request: Request, exc: UserNotFoundError) -> JSONResponse:
    return JSONResponse({"detail": exc.message}, status_code=status.HTTP_404_NOT_FOUND)


@app.exception_handler(InvalidUserInput)
async def invalid_input_handler(request: Request, exc: InvalidUserInput) -> JSONResponse:
    return JSONResponse(
        {"detail": exc.message, "violations": exc.violations},
        status_code=422,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await invalid_input_handler(request, InvalidUserInput(violations_from_errors(exc.errors())))


app.include_router(health.router, prefix=settings.API_V1_PREFIX)
app.include_router(auth.router, prefix=settings.API_V1_PREFIX)
app.include_router(users.router, prefix=settings.API_V1_PREFIX)
