"""Error Handlers — global exception handlers for the Trackline API.

Invariants:
    - TracklineError → its own failure envelope and http_status
    - RequestValidationError → 400 with field-level error details
    - Exception (catch-all) → 500; exception text only in development
    - Every failure body carries success=false and a top-level message

Design Decisions:
    - Three-layer handler: domain (TracklineError), validation (Pydantic), catch-all (Exception)
    - 4xx domain errors log at WARNING, 5xx at ERROR: client mistakes are not incidents
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.config import get_settings
from app.core.errors import TracklineError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)

# Request locations stripped from Pydantic error paths
_LOCATION_PREFIXES = {"body", "query", "path", "header"}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_trackline_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_trackline_error_handler(app: FastAPI) -> None:
    """Register Trackline domain/infrastructure error handler."""

    @app.exception_handler(TracklineError)
    async def trackline_error_handler(request: Request, exc: TracklineError):
        """Handle all Trackline domain/infrastructure errors."""
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        logger.log(
            level,
            f"TracklineError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "status_code": exc.http_status,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"path": request.url.path, "status_code": 400},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — internal details only reach development clients."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "status_code": 500},
        )
        error = {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "category": ErrorCategory.INTERNAL.value,
            "severity": ErrorSeverity.CRITICAL.value,
            "timestamp": _now_iso(),
        }
        if get_settings().is_development:
            error["details"] = {"exception": repr(exc)}
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "An unexpected error occurred",
                "error": error,
            },
        )


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _field_path(loc) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    details = [
        {
            "field": _field_path(e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    first = details[0] if details else None
    message = (
        f"Invalid value for '{first['field']}': {first['message']}"
        if first and first["field"] else "Invalid request data"
    )
    return {
        "success": False,
        "message": message,
        "error": {
            "code": "VALIDATION_ERROR",
            "message": message,
            "category": ErrorCategory.VALIDATION.value,
            "severity": ErrorSeverity.ERROR.value,
            "timestamp": _now_iso(),
            "details": details,
        },
    }
