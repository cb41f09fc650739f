"""
Application layer - use cases and DTOs.

Use cases are the only entry point for API handlers; DTOs are the only
contracts between the API and the use cases.
"""

from faktura.application.dto import (
    AutomationInvoiceRequest,
    AutomationInvoiceResponse,
    CalculationImportResponse,
    CreateInvoiceRequest,
    ErrorResponse,
    HealthResponse,
    InvoiceListResponse,
    InvoiceResponse,
    UpdateInvoiceRequest,
)
from faktura.application.use_cases import (
    CompleteInvoiceUseCase,
    CreateInvoiceFromAutomationUseCase,
    CreateInvoiceUseCase,
    ImportCalculationUseCase,
    PreviewInvoiceUseCase,
    UpdateInvoiceUseCase,
)

__all__ = [
    # Request DTOs
    "CreateInvoiceRequest",
    "UpdateInvoiceRequest",
    "AutomationInvoiceRequest",
    # Response DTOs
    "InvoiceResponse",
    "InvoiceListResponse",
    "AutomationInvoiceResponse",
    "CalculationImportResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "CreateInvoiceUseCase",
    "UpdateInvoiceUseCase",
    "CompleteInvoiceUseCase",
    "PreviewInvoiceUseCase",
    "CreateInvoiceFromAutomationUseCase",
    "ImportCalculationUseCase",
]
