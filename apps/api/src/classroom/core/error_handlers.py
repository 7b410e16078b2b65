"""
Error Handlers

Global exception handlers that turn service errors into the API's
structured error body:

    {"detail": {"error": "CLASS_NOT_FOUND", "message": "Class 7 not found"}}

Unexpected exceptions are logged with traceback and returned as a generic
INTERNAL_ERROR without internal details.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from classroom.modules.shared.exceptions import ServiceError

logger = logging.getLogger(__name__)


def error_body(error_code: str, message: str) -> dict:
    return {"detail": {"error": error_code, "message": message}}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_service_error_handler(app)
    _register_generic_error_handler(app)


def _register_service_error_handler(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        """Render any service-layer error with its own status code."""
        log = logger.error if exc.status_code >= 500 else logger.info
        log(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error_code, exc.message),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all, never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("INTERNAL_ERROR", "An unexpected error occurred"),
        )
