"""
Exception handlers - Map domain errors onto HTTP responses.

Business-rule rejections carry deliberately vague messages; store
failures and unexpected exceptions never expose internal detail.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sportpro.domain.exceptions import (
    Forbidden,
    InvalidCode,
    InvalidCredentials,
    NotFound,
    StoreFailure,
    Unauthenticated,
    ValidationError,
)

logger = logging.getLogger(__name__)

# (status code, client-facing message) per domain error family
_ERROR_RESPONSES: dict[type[Exception], tuple[int, str]] = {
    InvalidCredentials: (status.HTTP_401_UNAUTHORIZED, "Invalid credentials"),
    InvalidCode: (status.HTTP_400_BAD_REQUEST, "Invalid activation code"),
    Unauthenticated: (status.HTTP_401_UNAUTHORIZED, "Authentication required"),
    NotFound: (status.HTTP_404_NOT_FOUND, "Not found"),
    StoreFailure: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
}


def _field_name(loc: tuple) -> str:
    """Drop the leading request part ("body", "query") from a pydantic location."""
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


def setup_error_handlers(app: FastAPI) -> None:
    """Register exception handlers for domain and validation errors."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Validation error",
                "errors": [
                    {"field": _field_name(tuple(err["loc"])), "message": err["msg"]}
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(ValidationError)
    async def domain_validation_handler(_request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": exc.message,
                "errors": [{"field": exc.field, "message": exc.message}],
            },
        )

    @app.exception_handler(Forbidden)
    async def forbidden_handler(_request: Request, exc: Forbidden) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": str(exc) or "Forbidden"},
        )

    for exc_class, (status_code, message) in _ERROR_RESPONSES.items():
        app.add_exception_handler(exc_class, _static_handler(status_code, message))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def _static_handler(status_code: int, message: str):
    async def handler(_request: Request, _exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": message})

    return handler
