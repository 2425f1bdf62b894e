"""
Error handling middleware.

Every error response uses the ``ErrorResponse`` envelope:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
- detail: structured details flattened to ``key=value`` pairs
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stockroom.application.dto.responses import ErrorResponse
from stockroom.config import get_logger, get_settings
from stockroom.core.exceptions import (
    AuthError,
    ConflictError,
    HasTransactionsError,
    InsufficientStockError,
    NotFoundError,
    PermissionDeniedError,
    StockroomError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Checked in order, so subclasses must come before their bases
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    HasTransactionsError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

HINT_MAP: dict[str, str] = {
    "ITEM_NOT_FOUND": "Check the item ID and try GET /api/inventory to list items.",
    "TRANSACTION_NOT_FOUND": "Check the transaction ID and try GET /api/transactions.",
    "ALERT_NOT_FOUND": "Check the alert ID and try GET /api/alerts to list alerts.",
    "USER_NOT_FOUND": "Check the user ID or email.",
    "INSUFFICIENT_STOCK": "Reduce the quantity or stock in more units first.",
    "HAS_TRANSACTIONS": "Items with transaction history cannot be deleted.",
    "INVALID_QUANTITY": "Quantity must be a whole number greater than zero.",
    "CONFLICT": "The resource already exists or is in a conflicting state.",
    "AUTH_ERROR": "Send a valid token as 'Authorization: Bearer <token>'.",
    "PERMISSION_DENIED": "Your account is not allowed to perform this action.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Log in again to obtain a fresh token.",
    403: "You do not have access to this resource.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current state of the resource.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}

# Error codes for HTTPExceptions raised by routing (unknown path, wrong method)
HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "AUTH_ERROR",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "UNPROCESSABLE_ENTITY",
}

GENERIC_SERVER_ERROR = "An internal server error occurred"


def status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_json(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    """Render the standard error envelope."""
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, ""),
        detail=detail or None,
        path=request.url.path,
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions escaping the routes into error envelopes."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        status_code = status_for(exc)
        error_code = exc.code if isinstance(exc, StockroomError) else exc.__class__.__name__

        log = logger.error if status_code >= 500 else logger.warning
        log(
            "request_failed",
            request_id=getattr(request.state, "request_id", None),
            path=request.url.path,
            status_code=status_code,
            error_type=error_code,
            error=str(exc),
            traceback=traceback.format_exc() if status_code >= 500 else None,
        )

        if status_code >= 500 and get_settings().is_production:
            return error_json(request, status_code, error_code, GENERIC_SERVER_ERROR)

        detail = None
        if isinstance(exc, StockroomError):
            detail = "; ".join(f"{k}={v}" for k, v in exc.details.items() if v is not None)
        return error_json(request, status_code, error_code, str(exc), detail)


def setup_exception_handlers(app: FastAPI) -> None:
    """Give FastAPI's own errors the same envelope."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        problems = [
            f"{' -> '.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return error_json(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            "; ".join(problems),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return error_json(
            request,
            exc.status_code,
            HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            exc.detail or "An error occurred",
        )
