"""Preview Invoice Use Case - totals for an unsaved form."""

from faktura.application.dto.responses import InvoicePreviewResponse
from faktura.core.entities import CalculatedInvoice, InvoiceDraft
from faktura.core.services import compute_totals


class PreviewInvoiceUseCase:
    """Compute line amounts, VAT summary and totals without persisting."""

    def execute(self, draft: InvoiceDraft) -> CalculatedInvoice:
        return compute_totals(draft)

    def to_response(self, calculated: CalculatedInvoice) -> InvoicePreviewResponse:
        return InvoicePreviewResponse.from_calculated(calculated)
