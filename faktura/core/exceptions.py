"""
Domain exceptions for the invoice service.

Every error carries a machine-readable code and a details dict so the API
layer can render it without knowing the concrete type.
"""

from typing import Any


class FakturaError(Exception):
    """Base exception for all invoice service errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(FakturaError):
    """Base exception for storage operations."""

    pass


class InvoiceNotFoundError(StorageError):
    """Invoice not found in storage."""

    def __init__(self, invoice_id: str):
        super().__init__(
            f"Invoice not found: {invoice_id}",
            code="INVOICE_NOT_FOUND",
            details={"invoice_id": invoice_id},
        )


# Calculation import Exceptions
class CalculationImportError(FakturaError):
    """Base exception for damage-assessment export imports.

    Messages are user facing and shown verbatim in the invoice form.
    """

    pass


class InvalidCalculationFormatError(CalculationImportError):
    """Top-level entry of the export is missing or not an object."""

    def __init__(self, received: str | None = None):
        super().__init__(
            "Nieprawidłowy format danych kalkulacji",
            code="INVALID_CALCULATION_FORMAT",
            details={"received": received},
        )


class MissingCalculationSectionError(CalculationImportError):
    """Export entry has no Calculation section."""

    def __init__(self, keys: list[str] | None = None):
        super().__init__(
            "Brak sekcji Calculation w danych",
            code="MISSING_CALCULATION_SECTION",
            details={"keys": keys or []},
        )


class NoImportableItemsError(CalculationImportError):
    """Export is well formed but carries nothing that can be invoiced."""

    def __init__(self):
        super().__init__(
            "Nie znaleziono pozycji do zaimportowania",
            code="NO_IMPORTABLE_ITEMS",
        )


# Validation Exceptions
class ValidationError(FakturaError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class InvoiceValidationError(ValidationError):
    """Invoice failed validation before persistence."""

    def __init__(self, errors: list[dict[str, str]]):
        super().__init__(field="invoice", message=f"{len(errors)} invalid field(s)")
        self.code = "INVOICE_VALIDATION_ERROR"
        self.errors = errors
        self.details["errors"] = errors

    @classmethod
    def from_pydantic(cls, exc: Any) -> "InvoiceValidationError":
        """Build from a pydantic.ValidationError."""
        return cls(
            [
                {
                    "field": ".".join(str(part) for part in error["loc"]),
                    "message": error["msg"],
                }
                for error in exc.errors()
            ]
        )


class WebhookDomainNotAllowedError(ValidationError):
    """Webhook URL points outside the configured domain allowlist."""

    def __init__(self, hostname: str, allowed: list[str]):
        super().__init__(
            field="webhook_url",
            message=f"Webhook URL domain not allowed: {hostname}",
            value=hostname,
        )
        self.code = "WEBHOOK_DOMAIN_NOT_ALLOWED"
        self.details["allowed"] = allowed


class InvalidStatusTransitionError(ValidationError):
    """Attempt to move an invoice backwards in its workflow."""

    def __init__(self, current: str, requested: str):
        super().__init__(
            field="status",
            message=f"Cannot change status from '{current}' to '{requested}'",
            value=requested,
        )
        self.code = "INVALID_STATUS_TRANSITION"


# Automation gate Exceptions
class AutomationError(FakturaError):
    """Base exception for the automation intake gate."""

    pass


class AutomationNotConfiguredError(AutomationError):
    """Server has no automation secret configured."""

    def __init__(self):
        super().__init__(
            "Service unavailable - AUTOMATION_SECRET not configured",
            code="AUTOMATION_NOT_CONFIGURED",
        )


class AutomationUnauthorizedError(AutomationError):
    """Request secret header missing or wrong."""

    def __init__(self):
        super().__init__("Unauthorized", code="AUTOMATION_UNAUTHORIZED")


# Webhook Exceptions
class WebhookError(FakturaError):
    """Base exception for outgoing webhooks."""

    pass


class WebhookNotConfiguredError(WebhookError):
    """Signing secret is missing; payload must not be sent unsigned."""

    def __init__(self):
        super().__init__(
            "WEBHOOK_SECRET not configured - cannot send signed webhook",
            code="WEBHOOK_NOT_CONFIGURED",
        )


class WebhookDeliveryError(WebhookError):
    """Receiver was unreachable or answered with a non-2xx status."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        super().__init__(
            f"Webhook delivery to {url} failed: {reason}",
            code="WEBHOOK_DELIVERY_FAILED",
            details={"url": url, "reason": reason, "status_code": status_code},
        )
