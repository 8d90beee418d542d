"""Error taxonomy and the FastAPI handlers that render it.

Every error is returned as ``{"error": message, "details": {...}}``. Authentication
failures never carry details; upstream and integrity faults never expose internals.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None, details: dict[str, list[str]] | None = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class ValidationError(MarketplaceError):
    """Malformed or missing input; ``details`` maps field names to messages."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"


class ScopeRequiredError(ValidationError):
    message = "cityId is required. Listings are scoped by city."

    def __init__(self, message: str | None = None):
        super().__init__(message, details={"cityId": ["Required"]})


class ConflictError(ValidationError):
    status_code = status.HTTP_409_CONFLICT
    message = "Resource already exists"


class AuthenticationError(MarketplaceError):
    """Bad credentials or an invalid/expired/tampered session. Always generic."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated"

    def __init__(self, message: str | None = None):
        super().__init__(message)


class NotFoundOrForbidden(MarketplaceError):
    """The record is absent, not owned by the caller, or outside the caller's scope."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ScopeIntegrityError(MarketplaceError):
    """A record the caller owns disagrees with the caller's city. Indicates a data bug."""

    message = "Listing does not belong to user's city"


class UpstreamError(MarketplaceError):
    message = "Something went wrong. Please try again."


def error_body(message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return body


def _field_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    out: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "cookie", "header")]
        field = loc[0] if loc else "__root__"
        out.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return out


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.details))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ValidationError.message, _field_errors(exc)),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=UpstreamError.status_code,
        content=error_body(UpstreamError.message),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=UpstreamError.status_code,
        content=error_body(UpstreamError.message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
