"""Interface layer error handling.

Domain errors carry no HTTP knowledge; this module maps them to statuses
and ``{"detail": ...}`` bodies.
"""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tally.domain.error import (
    ConflictError,
    DomainError,
    InvalidArgumentError,
    NotAuthorizedError,
    NotFoundError,
    StorageUnavailableError,
    UnauthenticatedError,
)

# Most specific first; the first isinstance match wins
ERROR_STATUS: list[tuple[type[DomainError], int]] = [
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StorageUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(error: DomainError) -> int:
    """Resolve the HTTP status for a domain error."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Translate a domain error into a JSON error response."""
    status_code = status_for(exc)

    if status_code >= 500:
        logfire.error(
            "Request failed on storage",
            path=request.url.path,
            error=str(exc),
        )
    else:
        logfire.info(
            "Request rejected",
            path=request.url.path,
            status_code=status_code,
            error_type=type(exc).__name__,
            error=str(exc),
        )

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=status_code, content={"detail": str(exc)}, headers=headers
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handler on an app."""
    app.add_exception_handler(DomainError, domain_error_handler)
