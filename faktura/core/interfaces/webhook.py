"""Abstract interface for outgoing invoice webhooks."""

from abc import ABC, abstractmethod

from faktura.core.entities.invoice import Invoice


class IWebhookSender(ABC):
    """Delivers signed notifications about invoice lifecycle events."""

    @abstractmethod
    async def send_invoice_completed(self, invoice: Invoice) -> None:
        """
        Notify the invoice's webhook_url that it has been completed.

        Raises:
            WebhookNotConfiguredError: No signing secret is configured.
            WebhookDeliveryError: Receiver unreachable or answered non-2xx.
        """
        pass
