"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to consistent JSON responses. A failed step
leaves the recovery session where it was, so every error here is
recoverable by correcting the input and resubmitting.

Non-AppError exceptions bubble up as 500s (with Sentry reporting in production).
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.logging import get_logger

log = get_logger(__name__)


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    """A field constraint failed before any remote call was made."""

    status_code = 400
    error_code = "validation_error"


class ChallengeFailedError(AppError):
    """The bot-verification (captcha) challenge was rejected."""

    status_code = 400
    error_code = "challenge_failed"


class InvalidOrExpiredTokenError(AppError):
    status_code = 400
    error_code = "invalid_or_expired_token"


class OtpMismatchError(AppError):
    status_code = 400
    error_code = "otp_mismatch"


class CatalogReferenceMissingError(AppError):
    """A security question id is neither in the catalog nor the fallback list."""

    status_code = 400
    error_code = "catalog_reference_missing"


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"


class ProviderError(AppError):
    """Opaque failure from the credential store, database, or a delivery channel.

    The message is the provider's own text, passed through untranslated.
    """

    status_code = 502
    error_code = "provider_error"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        log.info(
            "request_failed",
            path=request.url.path,
            error_code=exc.error_code,
            status_code=exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        log.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred.", "code": "internal_error"},
        )
