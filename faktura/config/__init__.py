"""Configuration module."""

from faktura.config.logging import configure_logging, get_logger
from faktura.config.settings import (
    APISettings,
    AutomationSettings,
    InvoiceDefaultsSettings,
    SellerSettings,
    Settings,
    StorageSettings,
    WebhookSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "StorageSettings",
    "APISettings",
    "AutomationSettings",
    "WebhookSettings",
    "InvoiceDefaultsSettings",
    "SellerSettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
