"""Error Handlers - global exception handlers for a lazyrest router application.

Invariants:
    - LazyRestError -> plain-text public message at its http_status, logged
      at the level matching its severity
    - Exception (catch-all) -> generic 500, never leaks internal details
    - Dispatcher handlers render their own errors; these handlers only see
      what escapes a route (framework errors, bugs)

Design Decisions:
    - Plain text rather than the JSON envelope: error bodies keep the
      observed wire format (text for errors, envelope for success)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from lazyrest.core.errors import ErrorSeverity, LazyRestError

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_lazyrest_error_handler(app)
    _register_generic_error_handler(app)


def _register_lazyrest_error_handler(app: FastAPI) -> None:

    @app.exception_handler(LazyRestError)
    async def lazyrest_error_handler(request: Request, exc: LazyRestError):
        logger.log(
            _LOG_LEVELS[exc.severity],
            f"LazyRestError: {exc.message}",
            extra={**exc.to_log_extra(), "path": request.url.path},
        )
        return PlainTextResponse(
            exc.public_message, status_code=exc.http_status,
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all - never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return PlainTextResponse(
            "Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
