"""Data transfer objects for the API boundary."""

from faktura.application.dto.requests import (
    ApplyCalculationRequest,
    AutomationInvoiceRequest,
    AutomationItem,
    CreateInvoiceRequest,
    PartialParty,
    PreviewInvoiceRequest,
    UpdateInvoiceRequest,
)
from faktura.application.dto.responses import (
    ApplyCalculationResponse,
    AutomationInvoiceResponse,
    CalculationImportResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceListResponse,
    InvoicePreviewResponse,
    InvoiceResponse,
)

__all__ = [
    # Requests
    "CreateInvoiceRequest",
    "PreviewInvoiceRequest",
    "UpdateInvoiceRequest",
    "AutomationInvoiceRequest",
    "AutomationItem",
    "PartialParty",
    "ApplyCalculationRequest",
    # Responses
    "InvoiceResponse",
    "InvoiceListResponse",
    "InvoicePreviewResponse",
    "AutomationInvoiceResponse",
    "CalculationImportResponse",
    "ApplyCalculationResponse",
    "HealthResponse",
    "ErrorResponse",
]
