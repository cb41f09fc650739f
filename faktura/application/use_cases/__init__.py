"""Application use cases."""

from faktura.application.use_cases.create_invoice import (
    CreateInvoiceUseCase,
    build_stored_invoice,
    validate_draft,
)
from faktura.application.use_cases.create_invoice_from_automation import (
    AutomationInvoiceResult,
    CreateInvoiceFromAutomationUseCase,
    ensure_webhook_allowed,
    generate_invoice_number,
    is_host_allowed,
)
from faktura.application.use_cases.import_calculation import (
    ImportCalculationUseCase,
    calculation_to_automation_request,
)
from faktura.application.use_cases.preview_invoice import PreviewInvoiceUseCase
from faktura.application.use_cases.update_invoice import (
    CompleteInvoiceUseCase,
    UpdateInvoiceUseCase,
)

__all__ = [
    "CreateInvoiceUseCase",
    "UpdateInvoiceUseCase",
    "CompleteInvoiceUseCase",
    "PreviewInvoiceUseCase",
    "CreateInvoiceFromAutomationUseCase",
    "AutomationInvoiceResult",
    "ImportCalculationUseCase",
    "calculation_to_automation_request",
    "build_stored_invoice",
    "validate_draft",
    "ensure_webhook_allowed",
    "generate_invoice_number",
    "is_host_allowed",
]
