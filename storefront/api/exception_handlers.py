"""
Exception handlers for FastAPI application.

This module follows SRP by centralizing all exception handling logic.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from storefront.core.domain import (
    AuthorizationException,
    BusinessRuleViolationException,
    DomainException,
    EntityNotFoundException,
    InsufficientStockException,
    IntegrationException,
    ValidationException,
)

logger = logging.getLogger(__name__)

# First match wins
DOMAIN_STATUS_CODES: list[tuple[type[DomainException], int]] = [
    (AuthorizationException, status.HTTP_401_UNAUTHORIZED),
    (EntityNotFoundException, status.HTTP_404_NOT_FOUND),
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (InsufficientStockException, status.HTTP_400_BAD_REQUEST),
    (BusinessRuleViolationException, status.HTTP_400_BAD_REQUEST),
    (IntegrationException, status.HTTP_502_BAD_GATEWAY),
]


def status_code_for(exc: DomainException) -> int:
    for exc_type, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Translate domain exceptions into the standard error body."""
    if not isinstance(exc, DomainException):
        return await global_exception_handler(request, exc)

    status_code = status_code_for(exc)
    logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content={**exc.to_dict(), "status_code": status_code},
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTPException with consistent response format."""
    http_exc = exc if isinstance(exc, HTTPException) else HTTPException(status_code=500, detail=str(exc))
    return JSONResponse(
        status_code=http_exc.status_code,
        content={
            "error": True,
            "message": http_exc.detail,
            "status_code": http_exc.status_code,
        },
        headers=http_exc.headers,
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle request validation errors with detailed error messages."""
    if not isinstance(exc, RequestValidationError | ValidationError):
        return await global_exception_handler(request, exc)

    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    logger.warning(f"Validation error on {request.url.path}: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": True,
            "message": "Validation error",
            "details": errors,
            "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all unhandled exceptions.

    Logs the full exception with traceback and returns a safe error response.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
        exc_info=exc,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "message": "Internal server error",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("Exception handlers registered")
