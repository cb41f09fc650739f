"""Outgoing webhook delivery."""

from faktura.config import get_settings
from faktura.infrastructure.webhooks.http_sender import (
    HttpWebhookSender,
    build_invoice_completed_payload,
    build_signature,
    encode_payload,
)

_webhook_sender: HttpWebhookSender | None = None


def get_webhook_sender() -> HttpWebhookSender:
    """Get singleton webhook sender configured from settings."""
    global _webhook_sender
    if _webhook_sender is None:
        _webhook_sender = HttpWebhookSender(get_settings().webhook)
    return _webhook_sender


def reset_webhook_sender() -> None:
    """Drop the singleton (for testing)."""
    global _webhook_sender
    _webhook_sender = None


__all__ = [
    "HttpWebhookSender",
    "build_invoice_completed_payload",
    "build_signature",
    "encode_payload",
    "get_webhook_sender",
    "reset_webhook_sender",
]
