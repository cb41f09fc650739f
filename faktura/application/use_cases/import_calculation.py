"""Import Calculation Use Case - damage-assessment export to invoice lines."""

from typing import Any

from faktura.application.dto.requests import AutomationInvoiceRequest, AutomationItem
from faktura.application.dto.responses import ApplyCalculationResponse, CalculationImportResponse
from faktura.config import get_logger
from faktura.core.entities import CalculationImport
from faktura.core.services import (
    apply_calculation_import,
    calculate_items,
    parse_calculation_export,
    sum_totals,
    summarize_vat,
)

logger = get_logger(__name__)


def calculation_to_automation_request(
    imported: CalculationImport,
    webhook_url: str | None = None,
) -> AutomationInvoiceRequest:
    """Automation request carrying the imported lines and claim metadata.

    The buyer is left empty so the configured placeholders apply.
    """
    return AutomationInvoiceRequest(
        invoice_number=imported.invoice_number,
        buyer=None,
        items=[
            AutomationItem(
                name=item.name,
                code=item.code,
                kjc=item.kjc,
                qty=item.qty,
                uom=item.uom,
                unit_net=item.unit_net,
                vat_rate=item.vat_rate,
            )
            for item in imported.items
        ],
        claim_number=imported.claim_number,
        vehicle=imported.vehicle,
        document_notes=imported.document_notes,
        webhook_url=webhook_url,
    )


class ImportCalculationUseCase:
    """Parse a calculation export; optionally merge it into invoice form data."""

    def execute(self, payload: Any) -> CalculationImport:
        """Parse the export. Import errors propagate with their user-facing message."""
        return parse_calculation_export(payload)

    def apply(self, payload: Any, draft: dict[str, Any]) -> dict[str, Any]:
        """Parse the export and merge it into `draft`."""
        imported = self.execute(payload)
        merged = apply_calculation_import(draft, imported)
        logger.info(
            "calculation_import_applied",
            items=len(imported.items),
            invoice_number=merged.get("invoice_number"),
        )
        return merged

    def to_response(self, imported: CalculationImport) -> CalculationImportResponse:
        """Convert result to API response, with what the lines add up to."""
        lines = [amounts for _, amounts in calculate_items(imported.items)]
        return CalculationImportResponse(
            **imported.model_dump(),
            vat_summary=summarize_vat(lines),
            totals=sum_totals(lines),
        )

    def to_apply_response(self, merged: dict[str, Any]) -> ApplyCalculationResponse:
        return ApplyCalculationResponse(draft=merged, imported_items=len(merged.get("items", [])))
