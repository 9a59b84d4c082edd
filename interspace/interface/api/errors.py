"""Mapping of domain and adapter errors to HTTP responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from interspace.adapter.error import AdapterError
from interspace.domain.error import (
    AuthorizationError,
    ConflictError,
    DomainError,
    IdentityProofError,
    NotFoundError,
    ValidationError,
)
from interspace.interface.error import AuthenticationError

# Most specific first; the first matching class wins
ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (IdentityProofError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (DomainError, status.HTTP_400_BAD_REQUEST),
    (AdapterError, status.HTTP_502_BAD_GATEWAY),
    (ValueError, status.HTTP_400_BAD_REQUEST),
]


def status_for(error: Exception) -> int:
    """HTTP status code for an error raised by a use case."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Render an error as {"detail": message}."""
    status_code = status_for(exc)
    if status_code >= 500:
        logfire.error(
            "Request failed",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
    else:
        logfire.warn(
            "Request rejected",
            path=request.url.path,
            status_code=status_code,
            error=str(exc),
        )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    """Install handlers for every mapped error type."""
    for error_type, _ in ERROR_STATUS:
        app.add_exception_handler(error_type, handle_error)
