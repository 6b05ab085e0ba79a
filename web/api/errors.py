"""API errors, exception handlers and request guards."""

import hmac

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from app.container import container
from app.errors import (
    AuthError,
    NotFoundError,
    PreconditionFailedError,
    StorageError,
    UpstreamError,
    ValidationError,
)
from settings import STATUS_API_KEY

__all__ = [
    "AuthError",
    "NotFoundError",
    "PreconditionFailedError",
    "StorageError",
    "UpstreamError",
    "ValidationError",
    "register_error_handlers",
    "is_admin",
    "require_admin",
    "require_status_key",
    "validate_period",
]

ADMIN_HEADER = "x-admin-auth"
PERIODS = ("W", "M", "Q", "Y")


def _error(status: int, message: str, **extra) -> JSONResponse:
    body = {"error": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=status, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Map domain errors to `{"error": ...}` JSON responses."""

    @app.exception_handler(ValidationError)
    async def _validation(request: Request, exc: ValidationError):
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request", details=str(exc.errors()))

    @app.exception_handler(AuthError)
    async def _auth(request: Request, exc: AuthError):
        return _error(401, exc.message)

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(UpstreamError)
    async def _upstream(request: Request, exc: UpstreamError):
        logger.warning("{} {} -> {}: {}", request.method, request.url.path, exc.message, exc.details)
        return _error(500, exc.message, details=exc.details)

    @app.exception_handler(StorageError)
    async def _storage(request: Request, exc: StorageError):
        logger.warning("{} {} -> storage: {}", request.method, request.url.path, exc.message)
        return _error(500, exc.message)


def is_admin(request: Request) -> bool:
    """True when the request carries a valid admin password header."""
    return container.auth.is_valid(request.headers.get(ADMIN_HEADER))


def require_admin(request: Request) -> None:
    """FastAPI dependency for write endpoints."""
    container.auth.require_admin(request.headers.get(ADMIN_HEADER))


def require_status_key(request: Request) -> None:
    """FastAPI dependency: `Authorization: Bearer <STATUS_API_KEY>`."""
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not hmac.compare_digest(token.strip(), STATUS_API_KEY):
        raise AuthError("Unauthorized")


def validate_period(period: str) -> str:
    """Validate aggregation period code."""
    period = period.upper()
    if period not in PERIODS:
        raise ValidationError(f"Invalid period: {period}. Must be one of {', '.join(PERIODS)}")
    return period
