"""
Exception handlers.

Maps the shared exception hierarchy onto HTTP responses with a
``{"error", "code", "details"}`` body.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    SubVaultError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; the first matching base class wins
STATUS_CODES: list[tuple[type[SubVaultError], int]] = [
    (NotFoundError, 404),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 404),
    (ConflictError, 409),
    (ExternalServiceError, 500),
]


def status_for(exc: SubVaultError) -> int:
    """HTTP status code for a SubVault exception."""
    for exc_type, status_code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def public_message(exc: SubVaultError) -> str:
    """Message safe to return to the caller."""
    if isinstance(exc, AuthorizationError):
        # Same answer as a missing row
        return "Not found"
    return exc.message


async def subvault_exception_handler(request: Request, exc: SubVaultError):
    """Handle SubVault exceptions with the structured error body."""
    status_code = status_for(exc)

    if isinstance(exc, AuthorizationError):
        logger.warning(f"Ownership check failed ({exc.code}) - {request.url.path}")
        body = {"error": public_message(exc), "code": "NOT_FOUND", "details": {}}
    elif isinstance(exc, ExternalServiceError):
        logger.error(f"{exc.service} failure ({exc.code}): {exc.message} - {request.url.path}")
        body = {"error": exc.message, "code": exc.code, "details": {"service": exc.service}}
    else:
        logger.info(f"HTTP {status_code} ({exc.code}): {exc.message} - {request.url.path}")
        body = exc.to_dict()

    return JSONResponse(status_code=status_code, content=body)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors as 400s."""
    logger.warning(f"Validation error: {exc.errors()} - {request.url.path}")

    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation error",
            "code": "VALIDATION_ERROR",
            "details": {"errors": _jsonable_errors(exc)},
        },
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(f"Unexpected error: {str(exc)} - {request.url.path}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR", "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers above to an application."""
    app.add_exception_handler(SubVaultError, subvault_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)


def _jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
