"""
Global error handling middleware for the FastAPI application.

Catches AudioNoteError subclasses, request validation errors, and
unhandled exceptions, converting them into a consistent JSON envelope
``{"error", "details", "code", "timestamp"}``.
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from audionote.core.exceptions import AudioNoteError
from audionote.core.models import ErrorResponse

logger = logging.getLogger(__name__)


def _envelope(
    status_code: int,
    error: str,
    code: str,
    details: str | None = None,
    timestamp: str | datetime | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        details=details,
        code=code,
        timestamp=timestamp or datetime.now(UTC),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers three handlers in priority order:
    1. ``AudioNoteError``: maps domain errors to structured JSON responses.
    2. ``RequestValidationError``: malformed multipart bodies (400).
    3. ``Exception``: catch-all for unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(AudioNoteError)
    async def audionote_error_handler(_request: Request, exc: AudioNoteError) -> JSONResponse:
        """Convert domain-specific errors into a JSON error envelope."""
        logger.warning("%s (%s): %s", exc.code, exc.status_code, exc.details or exc.detail)
        return _envelope(exc.status_code, exc.detail, exc.code, exc.details, exc.timestamp)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation errors (malformed body/params)."""
        return _envelope(400, "Invalid request", "VALIDATION_ERROR", str(exc))

    @app.exception_handler(Exception)
    async def generic_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler; prevents stack traces from leaking to clients."""
        logger.exception("Request processing error", exc_info=exc)
        return _envelope(
            500,
            "Failed to process audio file",
            "INTERNAL_ERROR",
            "An unexpected error occurred. Please try again with a valid audio file.",
        )
