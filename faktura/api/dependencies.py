"""
Dependency injection container for FastAPI.

Provides use case instances and the automation gate to route handlers.
Tests replace these through app.dependency_overrides.
"""

import hmac
from functools import lru_cache

from fastapi import Depends, Header

from faktura.application.use_cases import (
    CompleteInvoiceUseCase,
    CreateInvoiceFromAutomationUseCase,
    CreateInvoiceUseCase,
    ImportCalculationUseCase,
    PreviewInvoiceUseCase,
    UpdateInvoiceUseCase,
)
from faktura.config import Settings, get_logger, get_settings
from faktura.core.exceptions import AutomationNotConfiguredError, AutomationUnauthorizedError
from faktura.infrastructure.storage.sqlite import SQLiteInvoiceStore, get_invoice_store

logger = get_logger(__name__)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Store dependencies
async def get_inv_store() -> SQLiteInvoiceStore:
    """Get invoice store."""
    return await get_invoice_store()


# Use case dependencies
def get_create_invoice_use_case() -> CreateInvoiceUseCase:
    """Get create invoice use case."""
    return CreateInvoiceUseCase()


def get_update_invoice_use_case() -> UpdateInvoiceUseCase:
    """Get update invoice use case."""
    return UpdateInvoiceUseCase()


def get_complete_invoice_use_case(
    update: UpdateInvoiceUseCase = Depends(get_update_invoice_use_case),
) -> CompleteInvoiceUseCase:
    """Get complete invoice use case."""
    return CompleteInvoiceUseCase(update)


def get_preview_invoice_use_case() -> PreviewInvoiceUseCase:
    """Get preview invoice use case."""
    return PreviewInvoiceUseCase()


def get_automation_use_case(
    settings: Settings = Depends(get_app_settings),
) -> CreateInvoiceFromAutomationUseCase:
    """Get create-from-automation use case."""
    return CreateInvoiceFromAutomationUseCase(settings=settings)


def get_import_calculation_use_case() -> ImportCalculationUseCase:
    """Get calculation import use case."""
    return ImportCalculationUseCase()


# Automation gate
async def require_automation_secret(
    x_automation_secret: str | None = Header(default=None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """
    Shared-secret check for automation endpoints.

    Raises:
        AutomationNotConfiguredError: No secret configured (503).
        AutomationUnauthorizedError: Header missing or different (401).
    """
    expected = settings.automation.secret
    if not expected:
        raise AutomationNotConfiguredError()

    provided = x_automation_secret or ""
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("automation_secret_rejected", header_present=x_automation_secret is not None)
        raise AutomationUnauthorizedError()
