"""Update Invoice Use Case - merge, recompute, persist, notify on completion."""

from faktura.application.dto.requests import UpdateInvoiceRequest
from faktura.application.dto.responses import InvoiceResponse
from faktura.application.use_cases.create_invoice import build_stored_invoice, validate_draft
from faktura.config import get_logger
from faktura.core.entities import Invoice, InvoiceStatus
from faktura.core.exceptions import (
    InvalidStatusTransitionError,
    InvoiceNotFoundError,
    WebhookError,
)
from faktura.core.interfaces import IInvoiceStore, IWebhookSender

logger = get_logger(__name__)


class UpdateInvoiceUseCase:
    """
    Apply a partial update to a stored invoice.

    The full record is read, the sent fields merged over it, and the result
    validated and recomputed as a whole before it is written back, so stored
    totals always match the stored items.

    A request that sets status to completed notifies the invoice's webhook
    unless a notification was already delivered. A failed delivery leaves
    the invoice completed with webhook_completed False; completing it again
    retries.
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        webhook_sender: IWebhookSender | None = None,
    ):
        self._invoice_store = invoice_store
        self._webhook_sender = webhook_sender

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from faktura.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    def _get_webhook_sender(self) -> IWebhookSender:
        if self._webhook_sender is None:
            from faktura.infrastructure.webhooks import get_webhook_sender

            self._webhook_sender = get_webhook_sender()
        return self._webhook_sender

    async def execute(self, invoice_id: str, request: UpdateInvoiceRequest) -> Invoice:
        """Execute update invoice use case."""
        store = await self._get_invoice_store()

        existing = await store.get_invoice(invoice_id)
        if existing is None:
            raise InvoiceNotFoundError(invoice_id)

        changes = request.changes()
        requested_status = request.status if "status" in changes else None

        if existing.is_completed and requested_status == InvoiceStatus.DRAFT:
            raise InvalidStatusTransitionError(
                current=existing.status.value,
                requested=requested_status.value,
            )

        draft = validate_draft({**existing.draft_fields(), **changes})
        invoice = await store.update_invoice(build_stored_invoice(draft, existing))

        logger.info(
            "update_invoice_complete",
            invoice_id=invoice_id,
            fields=sorted(changes),
            status=invoice.status.value,
            total_gross=invoice.total_gross,
        )

        if requested_status == InvoiceStatus.COMPLETED:
            await self._notify_completed(store, invoice)

        return invoice

    async def _notify_completed(self, store: IInvoiceStore, invoice: Invoice) -> None:
        if not invoice.webhook_url or invoice.webhook_completed:
            return

        try:
            await self._get_webhook_sender().send_invoice_completed(invoice)
        except WebhookError as e:
            logger.warning(
                "invoice_completed_webhook_failed",
                invoice_id=invoice.id,
                error_code=e.code,
                error=e.message,
            )
            return

        await store.set_webhook_completed(invoice.id, True)
        invoice.webhook_completed = True

    def to_response(self, invoice: Invoice) -> InvoiceResponse:
        """Convert result to API response."""
        return InvoiceResponse.from_invoice(invoice)


class CompleteInvoiceUseCase:
    """Mark an invoice completed; delivers the webhook at most once."""

    def __init__(self, update_use_case: UpdateInvoiceUseCase | None = None):
        self._update = update_use_case or UpdateInvoiceUseCase()

    async def execute(self, invoice_id: str) -> Invoice:
        return await self._update.execute(
            invoice_id,
            UpdateInvoiceRequest(status=InvoiceStatus.COMPLETED),
        )

    def to_response(self, invoice: Invoice) -> InvoiceResponse:
        """Convert result to API response."""
        return InvoiceResponse.from_invoice(invoice)
