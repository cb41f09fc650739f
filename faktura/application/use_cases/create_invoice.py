"""Create Invoice Use Case - validates, computes totals and persists a draft."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from faktura.application.dto.responses import InvoiceResponse
from faktura.config import get_logger
from faktura.core.entities import Invoice, InvoiceDraft, InvoiceStatus
from faktura.core.exceptions import InvoiceValidationError
from faktura.core.interfaces import IInvoiceStore
from faktura.core.money import format_amount
from faktura.core.services import compute_totals

logger = get_logger(__name__)


def validate_draft(data: dict[str, Any]) -> InvoiceDraft:
    """Validate form data, reporting every invalid field at once."""
    try:
        return InvoiceDraft.model_validate(data)
    except PydanticValidationError as e:
        raise InvoiceValidationError.from_pydantic(e) from e


def build_stored_invoice(draft: InvoiceDraft, existing: Invoice | None = None) -> Invoice:
    """
    Compute totals for a draft and shape it as a stored invoice.

    Items are stored as entered, with only the net/vat/gross the user
    supplied; the derived amounts live in the stored totals and are
    recomputed on every read. Identity, timestamps and the webhook flag are
    carried over from `existing` when given.
    """
    calculated = compute_totals(draft)
    fields = {name: getattr(draft, name) for name in InvoiceDraft.model_fields}

    carried: dict[str, Any] = {}
    if existing is not None:
        carried = {
            "id": existing.id,
            "webhook_completed": existing.webhook_completed,
            "created_at": existing.created_at,
            "updated_at": existing.updated_at,
        }

    return Invoice(
        **fields,
        **carried,
        total_net=format_amount(calculated.totals.net),
        total_vat=format_amount(calculated.totals.vat),
        total_gross=format_amount(calculated.totals.gross),
    )


class CreateInvoiceUseCase:
    """Create a draft invoice from a complete form."""

    def __init__(self, invoice_store: IInvoiceStore | None = None):
        self._invoice_store = invoice_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from faktura.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def execute(self, draft: InvoiceDraft) -> Invoice:
        """Persist a new invoice.

        New invoices always start as drafts; completion goes through the
        update or complete path so the webhook fires.
        """
        store = await self._get_invoice_store()

        invoice = build_stored_invoice(draft.model_copy(update={"status": InvoiceStatus.DRAFT}))
        invoice.webhook_completed = False

        invoice = await store.create_invoice(invoice)

        logger.info(
            "create_invoice_complete",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            items=len(invoice.items),
            total_gross=invoice.total_gross,
        )
        return invoice

    def to_response(self, invoice: Invoice) -> InvoiceResponse:
        """Convert result to API response."""
        return InvoiceResponse.from_invoice(invoice)
