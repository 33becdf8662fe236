"""Error taxonomy for AddedEmail operations and their HTTP mapping."""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.logging_config import get_logger

logger = get_logger()


class AddedEmailError(Exception):
    """Base class for failures surfaced to callers of the AddedEmail service."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "ADDED_EMAIL_ERROR"


class AuthorizationDenied(AddedEmailError):
    """No row level security policy grants the attempted operation."""

    code = "AUTHORIZATION_DENIED"

    def __init__(self, operation: str, authenticated: bool):
        self.operation = operation
        self.authenticated = authenticated
        if authenticated:
            message = f"Not permitted to {operation.lower()} this email entry"
        else:
            message = "Authentication required"
        super().__init__(message)

    @property
    def status_code(self) -> int:
        if self.authenticated:
            return status.HTTP_403_FORBIDDEN
        return status.HTTP_401_UNAUTHORIZED


class UniquenessViolation(AddedEmailError):
    """INSERT or UPDATE would produce a duplicate email."""

    status_code = status.HTTP_409_CONFLICT
    code = "EMAIL_ALREADY_EXISTS"

    def __init__(self, email: Optional[str] = None):
        self.email = email
        if email:
            message = f"Email already exists: {email}"
        else:
            message = "Email already exists"
        super().__init__(message)


class NotFound(AddedEmailError):
    """The targeted row does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, lookup):
        self.lookup = lookup
        super().__init__(f"Email entry not found: {lookup}")


def create_error_response(
    status_code: int, message: str, error_code: Optional[str] = None
) -> JSONResponse:
    content = {"detail": message}
    if error_code:
        content["code"] = error_code
    return JSONResponse(status_code=status_code, content=content)


async def added_email_exception_handler(request: Request, exc: AddedEmailError):
    return create_error_response(exc.status_code, str(exc), exc.code)


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """
    Handle database errors. Log the full error, return generic message.
    """
    logger.error(f"Database error on {request.url.path}", exc_info=exc)
    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "A database error occurred. Please try again later.",
        "DB_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AddedEmailError, added_email_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
