"""
Error handling middleware.

Renders every failure in the standard response envelope:
- success: always false
- error: machine-readable code
- message: human-readable description

Unexpected failures get an opaque message; details go to the log only.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from clinic_inventory.application.dto.responses import ApiResponse
from clinic_inventory.config import get_logger
from clinic_inventory.core.exceptions import (
    ClinicError,
    ConfigurationError,
    InsufficientStockError,
    NotFoundError,
    StorageError,
    UsageConflictError,
    ValidationError,
)

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred"

# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    UsageConflictError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Error codes for HTTP exceptions raised by routing
HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _envelope(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse.fail(error, message).model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions to enveloped JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(
        self,
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Convert exception to an enveloped JSON response."""
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        for exc_type, code in EXCEPTION_STATUS_MAP.items():
            if isinstance(exc, exc_type):
                status_code = code
                break

        if status_code >= 500:
            error_code = "INTERNAL_ERROR"
            message = INTERNAL_ERROR_MESSAGE
        elif isinstance(exc, ClinicError):
            error_code = exc.code
            message = exc.message
        else:
            error_code = exc.__class__.__name__
            message = str(exc)

        request_id = getattr(request.state, "request_id", None)

        log = logger.error if status_code >= 500 else logger.warning
        log(
            "request_error",
            request_id=request_id,
            path=request.url.path,
            status=status_code,
            error_type=exc.__class__.__name__,
            error=str(exc),
            traceback=traceback.format_exc() if status_code >= 500 else None,
        )

        return _envelope(status_code, error_code, message)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle request validation errors as 400 before any storage access."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return _envelope(
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            "; ".join(errors) or "Request validation failed",
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle routing errors (unknown path, unsupported method)."""
        error_code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
        response = _envelope(exc.status_code, error_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response
