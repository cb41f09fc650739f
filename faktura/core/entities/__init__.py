"""Core domain entities."""

from faktura.core.entities.calculation import CalculationImport
from faktura.core.entities.invoice import (
    CalculatedInvoice,
    Invoice,
    InvoiceDraft,
    InvoiceItem,
    InvoiceParty,
    InvoiceStatus,
    InvoiceTotals,
    VatSummaryRow,
)

__all__ = [
    # Invoice entities
    "Invoice",
    "InvoiceDraft",
    "CalculatedInvoice",
    "InvoiceItem",
    "InvoiceParty",
    "InvoiceStatus",
    "InvoiceTotals",
    "VatSummaryRow",
    # Import entities
    "CalculationImport",
]
