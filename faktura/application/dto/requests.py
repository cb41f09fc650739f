"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, HttpUrl

from faktura.core.entities import InvoiceDraft, InvoiceItem, InvoiceParty, InvoiceStatus


class CreateInvoiceRequest(InvoiceDraft):
    """Full invoice form. Totals are computed server side."""


class PreviewInvoiceRequest(InvoiceDraft):
    """Same shape as create; nothing is persisted."""


class UpdateInvoiceRequest(BaseModel):
    """Partial invoice update.

    Only fields present in the request body are applied; the merged record
    is validated and recomputed as a whole.
    """

    invoice_number: str | None = Field(default=None, min_length=1)
    issue_date: date | None = None
    delivery_date: date | None = None
    issue_place: str | None = Field(default=None, min_length=1)
    copy_type: str | None = None
    seller: InvoiceParty | None = None
    buyer: InvoiceParty | None = None
    items: list[InvoiceItem] | None = Field(default=None, min_length=1)
    payment_terms: str | None = None
    payment_type: str | None = None
    document_notes: str | None = None
    claim_number: str | None = None
    vehicle: str | None = None
    template_id: str | None = None
    webhook_url: str | None = None
    status: InvoiceStatus | None = None

    def changes(self) -> dict[str, Any]:
        """Fields explicitly sent by the client, as JSON-compatible data."""
        return self.model_dump(mode="json", exclude_unset=True)


class PartialParty(BaseModel):
    """Party block where every field may be missing."""

    name: str | None = None
    nip: str | None = None
    address_line_1: str | None = None
    address_line_2: str | None = None
    phone: str | None = None
    bank_name: str | None = None
    bank_branch_address: str | None = None
    iban: str | None = None


class AutomationItem(BaseModel):
    """Line item as sent by workflow automation; gaps are filled with defaults."""

    name: str | None = None
    code: str | None = None
    kjc: str | None = Field(default=None, validation_alias=AliasChoices("kjc", "cn_pkwiu"))
    qty: float | None = Field(default=None, ge=0)
    uom: str | None = None
    unit_net: float | None = Field(default=None, ge=0)
    vat_rate: float | None = Field(default=None, ge=0, le=100)


class AutomationInvoiceRequest(BaseModel):
    """Invoice request from workflow automation (e.g. n8n)."""

    invoice_number: str | None = Field(
        default=None,
        description="Generated as AUTO/<year>/<timestamp> when empty",
    )
    seller: PartialParty | None = None
    buyer: PartialParty | None = None
    items: list[AutomationItem] | None = None
    payment_terms: str | None = None
    payment_type: str | None = None
    document_notes: str | None = None
    claim_number: str | None = None
    vehicle: str | None = None
    template_id: str | None = None
    webhook_url: HttpUrl | None = Field(
        default=None,
        description="Notified once the invoice is completed; must be on an allowed domain",
        examples=["https://n8n.example.com/webhook/invoice-done"],
    )


class ApplyCalculationRequest(BaseModel):
    """Calculation export plus the invoice form it should be merged into."""

    payload: Any = Field(..., description="Calculation export (object or array)")
    draft: dict[str, Any] = Field(
        default_factory=dict,
        description="Current invoice form data",
    )
