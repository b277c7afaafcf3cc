"""Error Handlers - global exception handlers for the document store API.

Invariants:
    - DocStoreError -> its http_status, minimal JSON envelope, status headers (Allow)
    - Exception (catch-all) -> 500, never leaks internal details
    - No request-time error escapes as a process crash

Design Decisions:
    - Two-layer handler: domain (DocStoreError), catch-all (Exception)
    - Client errors logged at warning, store faults at error
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.core.errors import DocStoreError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_docstore_error_handler(app)
    _register_generic_error_handler(app)


def _register_docstore_error_handler(app: FastAPI) -> None:
    """Register document store error handler."""

    @app.exception_handler(DocStoreError)
    async def docstore_error_handler(request: Request, exc: DocStoreError):
        """Handle all document store errors."""
        level = (
            logging.ERROR if exc.severity == ErrorSeverity.CRITICAL
            else logging.WARNING
        )
        logger.log(
            level,
            f"DocStoreError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "method": request.method,
                "status_code": exc.http_status,
            },
            exc_info=exc.severity == ErrorSeverity.CRITICAL,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_response(),
            headers=exc.headers(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all - never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )
