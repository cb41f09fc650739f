"""
Signed completion webhooks over HTTP.

The body is serialized once and those exact bytes are both signed
(HMAC-SHA256, hex) and sent, so receivers can verify the signature against
the raw request body.
"""

import hashlib
import hmac
import json
from datetime import UTC, datetime
from typing import Any

import httpx

from faktura.config import get_logger
from faktura.config.settings import WebhookSettings
from faktura.core.entities import Invoice
from faktura.core.exceptions import WebhookDeliveryError, WebhookNotConfiguredError
from faktura.core.interfaces import IWebhookSender
from faktura.core.services import compute_totals

logger = get_logger(__name__)

INVOICE_COMPLETED_EVENT = "invoice_completed"


def build_invoice_completed_payload(
    invoice: Invoice,
    completed_at: datetime | None = None,
) -> dict[str, Any]:
    """Webhook body for a completed invoice; items carry computed amounts."""
    completed_at = completed_at or datetime.now(UTC)
    return {
        "event": INVOICE_COMPLETED_EVENT,
        "invoice_id": invoice.id,
        "invoice_number": invoice.invoice_number,
        "total_gross": invoice.total_gross,
        "buyer": invoice.buyer.model_dump(mode="json"),
        "items": [item.model_dump(mode="json") for item in compute_totals(invoice).items],
        "completed_at": completed_at.isoformat().replace("+00:00", "Z"),
    }


def encode_payload(payload: dict[str, Any]) -> bytes:
    """Compact UTF-8 JSON; these are the bytes that get signed."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def build_signature(body: bytes, secret: str) -> str:
    """Header value: "sha256=" + hex HMAC-SHA256 of the body."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


class HttpWebhookSender(IWebhookSender):
    """Posts signed invoice events with httpx."""

    def __init__(
        self,
        settings: WebhookSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        # Injected in tests (httpx.MockTransport)
        self._transport = transport

    async def send_invoice_completed(self, invoice: Invoice) -> None:
        if not invoice.webhook_url:
            return

        if not self.settings.secret:
            logger.error("webhook_not_configured", invoice_id=invoice.id)
            raise WebhookNotConfiguredError()

        body = encode_payload(build_invoice_completed_payload(invoice))
        headers = {
            "Content-Type": "application/json",
            self.settings.signature_header: build_signature(body, self.settings.secret),
        }

        url = invoice.webhook_url
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(url, content=body, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "webhook_http_error",
                invoice_id=invoice.id,
                url=url,
                status=e.response.status_code,
            )
            raise WebhookDeliveryError(
                url, f"HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.RequestError as e:
            logger.warning(
                "webhook_network_error",
                invoice_id=invoice.id,
                url=url,
                error=str(e),
            )
            raise WebhookDeliveryError(url, str(e) or e.__class__.__name__) from e

        logger.info(
            "webhook_sent",
            invoice_id=invoice.id,
            url=url,
            status=response.status_code,
        )
