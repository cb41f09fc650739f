"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description (Polish for import errors, shown as is)
- hint: suggested recovery action
- errors: per-field messages for validation failures
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from faktura.application.dto.responses import ErrorResponse
from faktura.config import get_logger
from faktura.core.exceptions import (
    AutomationNotConfiguredError,
    AutomationUnauthorizedError,
    CalculationImportError,
    FakturaError,
    InvalidStatusTransitionError,
    InvoiceNotFoundError,
    InvoiceValidationError,
    StorageError,
    ValidationError,
    WebhookError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first match wins, so subclasses go first
EXCEPTION_STATUS_MAP: list[tuple[type[Exception], int]] = [
    (InvoiceNotFoundError, status.HTTP_404_NOT_FOUND),
    (InvoiceValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidStatusTransitionError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (CalculationImportError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (AutomationNotConfiguredError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (AutomationUnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (WebhookError, status.HTTP_502_BAD_GATEWAY),
    (ValueError, status.HTTP_400_BAD_REQUEST),
]

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "INVOICE_NOT_FOUND": "Check the invoice ID and try GET /api/invoices to list available invoices.",
    "INVOICE_VALIDATION_ERROR": "Fix the fields listed under 'errors' and resubmit.",
    "INVALID_STATUS_TRANSITION": "Completed invoices cannot be reopened.",
    "WEBHOOK_DOMAIN_NOT_ALLOWED": "Use a webhook URL on a domain listed in WEBHOOK_ALLOWED_DOMAINS.",
    "INVALID_CALCULATION_FORMAT": "Send the calculation export as a JSON object or array of objects.",
    "MISSING_CALCULATION_SECTION": "The export must contain a Calculation section.",
    "NO_IMPORTABLE_ITEMS": "The calculation has no parts, labor, paint or other costs to invoice.",
    "AUTOMATION_NOT_CONFIGURED": "Set AUTOMATION_SECRET on the server.",
    "AUTOMATION_UNAUTHORIZED": "Send the shared secret in the X-Automation-Secret header.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication is required for this endpoint.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current state of the resource.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to a standardized JSON response."""
    status_code = _status_for(exc)

    if isinstance(exc, FakturaError):
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
        error_type=error_code,
        error=message,
        status=status_code,
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        path=request.url.path,
        errors=exc.errors if isinstance(exc, InvoiceValidationError) else None,
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Last line of defence for exceptions no handler picked up.
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
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(FakturaError)
    async def domain_exception_handler(request: Request, exc: FakturaError) -> JSONResponse:
        """Handle domain errors raised by use cases and dependencies."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"] if part != "body"),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint=_get_hint("VALIDATION_ERROR", 422),
                detail="; ".join(f"{e['field']}: {e['message']}" for e in errors),
                path=request.url.path,
                errors=errors,
            ).model_dump(mode="json", exclude_none=True),
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
            ).model_dump(mode="json", exclude_none=True),
        )


def _infer_error_code(status_code: int) -> str:
    """Machine-readable error code for a bare HTTPException."""
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "UNPROCESSABLE_ENTITY",
    }.get(status_code, "HTTP_ERROR")
