"""
Invoice domain entities with Pydantic v2 validation.

Field names follow the stored document format (qty, uom, unit_net, nip)
because the same JSON travels between the form, the API, the database
and the completion webhook.
"""

from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator


class InvoiceStatus(str, Enum):
    """Invoice workflow status. COMPLETED is terminal."""

    DRAFT = "draft"
    COMPLETED = "completed"


class InvoiceItem(BaseModel):
    """
    Single invoice line.

    net/vat/gross are optional overrides; when absent they are derived by
    the totals engine each time the invoice is calculated.
    """

    name: str = Field(..., min_length=1)
    code: str | None = None
    # KJC classification; "cn_pkwiu" is the deprecated name of the same field
    kjc: str | None = Field(default=None, validation_alias=AliasChoices("kjc", "cn_pkwiu"))
    qty: float = Field(..., ge=0)
    uom: str = Field(..., min_length=1)
    unit_net: float = Field(..., ge=0)
    vat_rate: float = Field(..., ge=0, le=100)
    net: float | None = None
    vat: float | None = None
    gross: float | None = None

    @field_validator("name", "uom", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @model_validator(mode="after")
    def check_overrides(self) -> "InvoiceItem":
        """Explicit net + vat must add up to an explicit gross."""
        if self.net is not None and self.vat is not None and self.gross is not None:
            if abs(self.net + self.vat - self.gross) > 0.005:
                raise ValueError("net + vat must equal gross")
        return self


class InvoiceParty(BaseModel):
    """Seller or buyer block printed on the invoice."""

    name: str = Field(..., min_length=1)
    nip: str = Field(..., min_length=1)
    address_line_1: str = Field(..., min_length=1)
    address_line_2: str = Field(..., min_length=1)
    phone: str | None = None
    bank_name: str | None = None
    bank_branch_address: str | None = None
    iban: str | None = None


class VatSummaryRow(BaseModel):
    """Aggregate of all lines sharing one VAT rate."""

    rate: float
    net: float = 0.0
    vat: float = 0.0
    gross: float = 0.0


class InvoiceTotals(BaseModel):
    """Grand totals of an invoice."""

    net: float = 0.0
    vat: float = 0.0
    gross: float = 0.0


class InvoiceDraft(BaseModel):
    """Everything a user fills in; what the totals engine works on."""

    invoice_number: str = Field(..., min_length=1)
    issue_date: date
    delivery_date: date
    issue_place: str = Field(..., min_length=1)
    copy_type: str = "ORYGINAŁ"
    seller: InvoiceParty
    buyer: InvoiceParty
    items: list[InvoiceItem] = Field(..., min_length=1)
    payment_terms: str | None = None
    payment_type: str = "przelew"
    document_notes: str | None = None
    claim_number: str | None = None
    vehicle: str | None = None
    template_id: str | None = None  # deprecated, kept for stored records
    webhook_url: str | None = None
    status: InvoiceStatus = InvoiceStatus.DRAFT


class CalculatedInvoice(InvoiceDraft):
    """Draft with per-item amounts filled in, VAT summary and totals."""

    vat_summary: list[VatSummaryRow] = Field(default_factory=list)
    totals: InvoiceTotals = Field(default_factory=InvoiceTotals)


class Invoice(InvoiceDraft):
    """Persisted invoice."""

    id: str | None = None

    # Fixed 2-decimal strings, as stored
    total_net: str = "0.00"
    total_vat: str = "0.00"
    total_gross: str = "0.00"

    webhook_completed: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == InvoiceStatus.COMPLETED

    def draft_fields(self) -> dict[str, Any]:
        """Fields a user may edit, as plain JSON-compatible data."""
        return self.model_dump(
            mode="json",
            include=set(InvoiceDraft.model_fields),
        )
