"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import json
import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stockledger.application.dto.responses import ErrorResponse
from stockledger.config import get_logger
from stockledger.core.exceptions import (
    DuplicateSkuError,
    InsufficientStockError,
    InvalidFieldError,
    ItemNotFoundError,
    PersistenceError,
    StockLedgerError,
    UnauthorizedError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    ItemNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateSkuError: status.HTTP_409_CONFLICT,
    InvalidFieldError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "UNAUTHORIZED": "Your role does not permit this operation. Ask an Admin or Manager.",
    "ITEM_NOT_FOUND": "Check the SKU and try GET /api/items to list available items.",
    "DUPLICATE_SKU": "Choose another SKU or omit it; GET /api/items/next-sku suggests one.",
    "INVALID_FIELD": "Quantities and prices must be non-negative; names must not be empty.",
    "INSUFFICIENT_STOCK": "Reduce the quantity or restock the item first.",
    "PERSISTENCE_ERROR": "The change was not saved. Retry, and check server logs if it persists.",
    "VALIDATION_ERROR": "Check the request body and the X-Role header.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    403: "Your role does not permit this operation.",
    404: "The requested resource was not found. Verify the SKU.",
    409: "The request conflicts with the current stock state.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(request: Request, exc: Exception, status_code: int) -> JSONResponse:
    if isinstance(exc, StockLedgerError):
        error_code = exc.code
        message = exc.message
        detail = json.dumps(exc.details, default=str) if exc.details else None
    else:
        error_code = exc.__class__.__name__
        message = str(exc)
        detail = None

    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escape the exception handlers to
    standardized JSON error responses.
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
        """Convert exception to standardized JSON response."""
        status_code = _status_for(exc)
        request_id = getattr(request.state, "request_id", None)

        logger.error(
            "unhandled_exception",
            request_id=request_id,
            path=request.url.path,
            error_type=exc.__class__.__name__,
            error=str(exc),
            traceback=traceback.format_exc() if status_code >= 500 else None,
        )

        return _error_response(request, exc, status_code)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(StockLedgerError)
    async def stock_ledger_exception_handler(
        request: Request,
        exc: StockLedgerError,
    ) -> JSONResponse:
        """Handle domain errors raised by the engine."""
        status_code = _status_for(exc)
        log = logger.error if status_code >= 500 else logger.info
        log(
            "request_rejected",
            request_id=getattr(request.state, "request_id", None),
            path=request.url.path,
            error_code=exc.code,
            error=exc.message,
        )
        return _error_response(request, exc, status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint=_get_hint("VALIDATION_ERROR", 422),
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int) -> str:
    """Infer a machine-readable error code from an HTTP status."""
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 405:
        return "METHOD_NOT_ALLOWED"
    if status_code == 400:
        return "BAD_REQUEST"
    return "HTTP_ERROR"
