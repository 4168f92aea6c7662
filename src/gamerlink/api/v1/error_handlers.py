# gamerlink/api/v1/error_handlers.py
"""
FastAPI exception handlers that map app-level exceptions to HTTP responses.

Services and repositories raise `gamerlink.exceptions.base.*`; the status code
and body come from the exception itself (`http_status()` / `to_payload()`), so
the handlers only differ in how loudly they log.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging
from gamerlink.exceptions.base import (
    RepositoryError,
    ValidationError,
    NotFoundError,
    ForbiddenError,
    DuplicateError,
    InvalidFieldError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


def _respond(exc: RepositoryError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def client_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """
    Expected caller mistakes: 404, 403, 409, 422.
    Payload: {"detail": "...", "code": "not_found", "fields": [...]}
    """
    logger.info(
        "api.client_error",
        extra={
            "method": request.method,
            "path": request.url.path,
            "error_code": exc.error_code,
            "fields": exc.fields,
        },
    )
    return _respond(exc)


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    """503: the database could not be reached. The client may retry; we never do."""
    logger.error("api.store_unavailable", extra={"method": request.method, "path": request.url.path})
    return _respond(exc)


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """Fallback for anything else in the hierarchy (400 unless the code says otherwise)."""
    logger.warning(
        "api.repository_error",
        extra={"method": request.method, "path": request.url.path, "error": str(exc)},
    )
    return _respond(exc)


def register_exception_handlers(app: FastAPI) -> None:
    # Most specific first
    for exc_class in (ValidationError, NotFoundError, ForbiddenError, DuplicateError, InvalidFieldError):
        app.add_exception_handler(exc_class, client_error_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
