"""Core interfaces (ports) for dependency injection."""

from faktura.core.interfaces.storage import IInvoiceStore
from faktura.core.interfaces.webhook import IWebhookSender

__all__ = [
    # Storage interfaces
    "IInvoiceStore",
    # Webhook interfaces
    "IWebhookSender",
]
