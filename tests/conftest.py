"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import date
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from faktura.api.dependencies import get_app_settings
from faktura.api.main import app
from faktura.config import (
    AutomationSettings,
    Settings,
    StorageSettings,
    WebhookSettings,
)
from faktura.core.entities import Invoice, InvoiceItem, InvoiceParty

AUTOMATION_SECRET = "test-automation-secret"
WEBHOOK_SECRET = "test-webhook-secret"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings with both secrets configured and a temp data dir."""
    return Settings(
        storage=StorageSettings(data_dir=tmp_path),
        automation=AutomationSettings(secret=AUTOMATION_SECRET),
        webhook=WebhookSettings(
            secret=WEBHOOK_SECRET,
            allowed_domains=["example.com", "localhost"],
        ),
    )


@pytest_asyncio.fixture
async def async_client(test_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Async test client; routes see `test_settings`."""
    app.dependency_overrides[get_app_settings] = lambda: test_settings
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def automation_headers() -> dict[str, str]:
    return {"X-Automation-Secret": AUTOMATION_SECRET}


@pytest.fixture
def seller_data() -> dict:
    return {
        "name": "Auto Serwis Kowalski",
        "nip": "525-000-11-22",
        "address_line_1": "ul. Warsztatowa 5",
        "address_line_2": "00-001 Warszawa",
        "bank_name": "Bank Polski",
        "iban": "PL61 1090 1014 0000 0712 1981 2874",
    }


@pytest.fixture
def buyer_data() -> dict:
    return {
        "name": "Towarzystwo Ubezpieczeń SA",
        "nip": "526-111-22-33",
        "address_line_1": "al. Jerozolimskie 100",
        "address_line_2": "00-807 Warszawa",
    }


@pytest.fixture
def sample_draft_data(seller_data: dict, buyer_data: dict) -> dict:
    """Invoice form data as the UI posts it."""
    return {
        "invoice_number": "FV/2024/12/001",
        "issue_date": "2024-12-10",
        "delivery_date": "2024-12-09",
        "issue_place": "Warszawa",
        "seller": seller_data,
        "buyer": buyer_data,
        "items": [
            {
                "name": "Zderzak przedni",
                "code": "5K0807221",
                "qty": 1,
                "uom": "szt",
                "unit_net": 850.0,
                "vat_rate": 23,
            },
            {
                "name": "Robocizna",
                "qty": 2.5,
                "uom": "h",
                "unit_net": 120.0,
                "vat_rate": 23,
            },
        ],
        "payment_terms": "14 dni",
        "claim_number": "2024/12/001",
        "vehicle": "Volkswagen Golf WX 12345",
    }


@pytest.fixture
def sample_invoice(seller_data: dict, buyer_data: dict) -> Invoice:
    """Stored draft invoice: 850.00 + 300.00 net at 23%."""
    return Invoice(
        id="inv-0001",
        invoice_number="FV/2024/12/001",
        issue_date=date(2024, 12, 10),
        delivery_date=date(2024, 12, 9),
        issue_place="Warszawa",
        seller=InvoiceParty(**seller_data),
        buyer=InvoiceParty(**buyer_data),
        items=[
            InvoiceItem(name="Zderzak przedni", qty=1, uom="szt", unit_net=850.0, vat_rate=23),
            InvoiceItem(name="Robocizna", qty=2.5, uom="h", unit_net=120.0, vat_rate=23),
        ],
        total_net="1150.00",
        total_vat="264.50",
        total_gross="1414.50",
    )
