"""Error Handlers — map analysis failures onto the JSON error envelope.

Invariants:
    - Every error response has the shape of ClusterLintError.to_response()
    - Dump problems (4xx) log at WARNING, server-side failures at ERROR
    - A body that is missing or not JSON is a 400 VALIDATION_ERROR, never FastAPI's 422
    - Unexpected exceptions answer INTERNAL_ERROR; message and traceback stay in the log
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clusterlint.core.errors import ClusterLintError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity, **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **extra,
        },
    }


def _field_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain, request-validation and catch-all handlers."""

    @app.exception_handler(ClusterLintError)
    async def clusterlint_error_handler(request: Request, exc: ClusterLintError):
        level = logging.WARNING if exc.http_status < 500 else logging.ERROR
        logger.log(
            level, exc.message,
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = _field_errors(exc)
        logger.warning(
            f"Rejected request body: {len(details)} error(s)",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_envelope(
                "VALIDATION_ERROR", "Request body must be an agency dump in JSON",
                ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
            ),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Analysis failed unexpectedly: {exc!r}",
            exc_info=exc,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_envelope(
                "INTERNAL_ERROR", "An unexpected error occurred",
                ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ),
        )
