"""Response DTOs for API endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from faktura.core.entities import (
    CalculatedInvoice,
    CalculationImport,
    Invoice,
    InvoiceItem,
    InvoiceTotals,
    VatSummaryRow,
)
from faktura.core.money import parse_amount
from faktura.core.services import amount_in_words, compute_totals


class InvoiceResponse(Invoice):
    """Stored invoice plus figures derived for display.

    `items` are the lines as entered; `calculated_items` carry the computed
    net/vat/gross of each line.
    """

    calculated_items: list[InvoiceItem] = Field(default_factory=list)
    vat_summary: list[VatSummaryRow] = Field(default_factory=list)
    total_gross_words: str = ""

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceResponse":
        calculated = compute_totals(invoice)
        return cls(
            **{name: getattr(invoice, name) for name in Invoice.model_fields},
            calculated_items=calculated.items,
            vat_summary=calculated.vat_summary,
            total_gross_words=amount_in_words(parse_amount(invoice.total_gross)),
        )


class InvoiceListResponse(BaseModel):
    """Invoice list."""

    invoices: list[InvoiceResponse]
    total: int
    limit: int
    offset: int


class InvoicePreviewResponse(BaseModel):
    """Computed figures for an unsaved form."""

    items: list[InvoiceItem]
    vat_summary: list[VatSummaryRow]
    totals: InvoiceTotals
    total_gross_words: str

    @classmethod
    def from_calculated(cls, calculated: CalculatedInvoice) -> "InvoicePreviewResponse":
        return cls(
            items=calculated.items,
            vat_summary=calculated.vat_summary,
            totals=calculated.totals,
            total_gross_words=amount_in_words(calculated.totals.gross),
        )


class AutomationInvoiceResponse(BaseModel):
    """Invoice created by automation and the form URL to review it."""

    invoice: InvoiceResponse
    edit_url: str


class CalculationImportResponse(CalculationImport):
    """Imported lines, metadata and what they add up to."""

    vat_summary: list[VatSummaryRow] = Field(default_factory=list)
    totals: InvoiceTotals = Field(default_factory=InvoiceTotals)


class ApplyCalculationResponse(BaseModel):
    """Invoice form data with an import merged in."""

    draft: dict[str, Any]
    imported_items: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str = "unknown"
    automation_configured: bool = False
    webhook_configured: bool = False


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVOICE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    Field-level validation failures are listed under `errors`.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    errors: list[dict[str, Any]] | None = Field(
        default=None, description="Per-field validation errors"
    )
    timestamp: datetime = Field(default_factory=datetime.now)
