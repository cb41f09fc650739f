"""
Abstract interface for invoice storage.

The store persists whole invoice records; totals are computed before a
record reaches it and are stored as fixed two-decimal strings.
"""

from abc import ABC, abstractmethod

from faktura.core.entities.invoice import Invoice, InvoiceStatus


class IInvoiceStore(ABC):
    """
    Abstract interface for invoice storage.

    Handles invoices with their parties and line items.
    """

    @abstractmethod
    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Create a new invoice record, assigning its id."""
        pass

    @abstractmethod
    async def get_invoice(self, invoice_id: str) -> Invoice | None:
        """Get invoice by ID."""
        pass

    @abstractmethod
    async def list_invoices(
        self,
        limit: int = 100,
        offset: int = 0,
        status: InvoiceStatus | None = None,
    ) -> list[Invoice]:
        """List invoices, newest first."""
        pass

    @abstractmethod
    async def count_invoices(self, status: InvoiceStatus | None = None) -> int:
        """Count invoices."""
        pass

    @abstractmethod
    async def update_invoice(self, invoice: Invoice) -> Invoice:
        """Replace the stored record with `invoice`."""
        pass

    @abstractmethod
    async def set_webhook_completed(self, invoice_id: str, completed: bool = True) -> None:
        """Record whether the completion webhook has been delivered."""
        pass

    @abstractmethod
    async def delete_invoice(self, invoice_id: str) -> bool:
        """Delete invoice. Returns False when it did not exist."""
        pass
