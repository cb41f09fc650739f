"""Create Invoice From Automation Use Case - fills gaps with configured defaults."""

import time
from dataclasses import dataclass
from datetime import date
from typing import Any
from urllib.parse import urlsplit

from faktura.application.dto.requests import (
    AutomationInvoiceRequest,
    AutomationItem,
    PartialParty,
)
from faktura.application.dto.responses import AutomationInvoiceResponse, InvoiceResponse
from faktura.application.use_cases.create_invoice import CreateInvoiceUseCase, validate_draft
from faktura.config import Settings, get_logger, get_settings
from faktura.core.entities import Invoice, InvoiceStatus
from faktura.core.exceptions import WebhookDomainNotAllowedError
from faktura.core.interfaces import IInvoiceStore

logger = get_logger(__name__)


def is_host_allowed(hostname: str, allowed_domains: list[str]) -> bool:
    """Exact match or a subdomain of an allowed domain.

    >>> is_host_allowed("hooks.example.com", ["example.com"])
    True
    >>> is_host_allowed("badexample.com", ["example.com"])
    False
    """
    hostname = hostname.lower().rstrip(".")
    return any(
        hostname == domain or hostname.endswith("." + domain)
        for domain in (d.lower() for d in allowed_domains)
    )


def ensure_webhook_allowed(url: str, allowed_domains: list[str]) -> None:
    """Raise WebhookDomainNotAllowedError unless the URL host is allowlisted."""
    hostname = urlsplit(url).hostname or ""
    if not hostname or not is_host_allowed(hostname, allowed_domains):
        raise WebhookDomainNotAllowedError(hostname, allowed_domains)


def generate_invoice_number(prefix: str, today: date | None = None) -> str:
    """<prefix>/<year>/<epoch milliseconds>."""
    today = today or date.today()
    return f"{prefix}/{today.year}/{int(time.time() * 1000)}"


def _merge_party(
    partial: PartialParty | None,
    defaults: dict[str, str | None],
) -> dict[str, str | None]:
    provided = partial.model_dump() if partial else {}
    merged = {}
    for field, default in defaults.items():
        value = provided.get(field)
        # Blank strings count as missing, like absent fields
        merged[field] = value if value not in (None, "") else default
    return merged


@dataclass
class AutomationInvoiceResult:
    """Created invoice and the URL of its edit form."""

    invoice: Invoice
    edit_url: str


class CreateInvoiceFromAutomationUseCase:
    """
    Create a draft invoice from a sparse automation request.

    Missing seller fields come from the configured default seller, missing
    buyer fields from placeholder values, and an empty item list becomes a
    single placeholder service line, so the result always validates and a
    person can finish it in the edit form.
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        settings: Settings | None = None,
    ):
        self._create = CreateInvoiceUseCase(invoice_store)
        self.settings = settings or get_settings()

    def _build_items(self, items: list[AutomationItem] | None) -> list[dict[str, Any]]:
        defaults = self.settings.invoice
        if not items:
            return [
                {
                    "name": defaults.item_name,
                    "qty": 1,
                    "uom": defaults.item_uom,
                    "unit_net": 0,
                    "vat_rate": defaults.vat_rate,
                }
            ]

        # Only None is missing; an explicit 0 (e.g. a 0% VAT rate) is kept
        return [
            {
                "name": item.name or defaults.item_name,
                "code": item.code,
                "kjc": item.kjc,
                "qty": item.qty if item.qty is not None else 1,
                "uom": item.uom or defaults.item_uom,
                "unit_net": item.unit_net if item.unit_net is not None else 0,
                "vat_rate": item.vat_rate if item.vat_rate is not None else defaults.vat_rate,
            }
            for item in items
        ]

    def build_draft_data(self, request: AutomationInvoiceRequest) -> dict[str, Any]:
        """Form data for the request with every default applied."""
        defaults = self.settings.invoice
        today = date.today()

        invoice_number = (request.invoice_number or "").strip() or generate_invoice_number(
            defaults.automatic_number_prefix, today
        )

        buyer_defaults: dict[str, str | None] = {
            "name": defaults.buyer_name,
            "nip": defaults.buyer_nip,
            "address_line_1": defaults.buyer_address_1,
            "address_line_2": defaults.buyer_address_2,
            "phone": None,
            "bank_name": None,
            "bank_branch_address": None,
            "iban": None,
        }

        return {
            "invoice_number": invoice_number,
            "issue_date": today.isoformat(),
            "delivery_date": today.isoformat(),
            "issue_place": defaults.issue_place,
            "copy_type": defaults.copy_type,
            "seller": _merge_party(request.seller, self.settings.seller.as_party_fields()),
            "buyer": _merge_party(request.buyer, buyer_defaults),
            "items": self._build_items(request.items),
            "payment_terms": request.payment_terms,
            "payment_type": request.payment_type or defaults.payment_type,
            "document_notes": request.document_notes,
            "claim_number": request.claim_number,
            "vehicle": request.vehicle,
            "template_id": request.template_id,
            "webhook_url": str(request.webhook_url) if request.webhook_url else None,
            "status": InvoiceStatus.DRAFT.value,
        }

    async def execute(
        self,
        request: AutomationInvoiceRequest,
        host_url: str,
    ) -> AutomationInvoiceResult:
        """Execute create-from-automation use case."""
        if request.webhook_url is not None:
            ensure_webhook_allowed(str(request.webhook_url), self.settings.webhook.allowed_domains)

        draft = validate_draft(self.build_draft_data(request))
        invoice = await self._create.execute(draft)

        edit_url = f"{host_url.rstrip('/')}/edit/{invoice.id}"
        logger.info(
            "automation_invoice_created",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            has_webhook=invoice.webhook_url is not None,
        )
        return AutomationInvoiceResult(invoice=invoice, edit_url=edit_url)

    def to_response(self, result: AutomationInvoiceResult) -> AutomationInvoiceResponse:
        """Convert result to API response."""
        return AutomationInvoiceResponse(
            invoice=InvoiceResponse.from_invoice(result.invoice),
            edit_url=result.edit_url,
        )
