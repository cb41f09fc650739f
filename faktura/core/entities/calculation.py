"""Result of importing a damage-assessment (calculation) export."""

from pydantic import BaseModel, Field

from faktura.core.entities.invoice import InvoiceItem


class CalculationImport(BaseModel):
    """Draft invoice lines plus the metadata found in the export."""

    items: list[InvoiceItem] = Field(default_factory=list)
    claim_number: str | None = None
    vehicle: str | None = None
    document_notes: str | None = None
    # Suggested number derived from the claim id
    invoice_number: str | None = None
