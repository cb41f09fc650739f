"""API middleware."""

from faktura.api.middleware.error_handler import ErrorHandlerMiddleware
from faktura.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
