"""
Damage-assessment calculation import.

Turns an Audatex calculation export (untrusted, partially present JSON) into
invoice line items plus claim metadata. Every path into the document is
optional; only a missing top-level entry or a missing Calculation section
is fatal.
"""

import re
from collections.abc import Mapping
from typing import Any

from faktura.config import get_logger
from faktura.core.entities.calculation import CalculationImport
from faktura.core.entities.invoice import InvoiceDraft, InvoiceItem
from faktura.core.exceptions import (
    InvalidCalculationFormatError,
    MissingCalculationSectionError,
    NoImportableItemsError,
)
from faktura.core.lookup import as_list, clean_text, dig, first_present
from faktura.core.money import parse_amount, parse_number, round_currency

logger = get_logger(__name__)

DEFAULT_VAT_RATE = 23.0

LABOR_LABEL = "Robocizna"
ADDITIONAL_COSTS_LABEL = "Koszty dodatkowe"
PAINT_LABEL = "Lakierowanie"
SUNDRY_LABEL = "Materiały dodatkowe (FCSundry)"
PART_FALLBACK_NAME = "Część"

UNIT_HOUR = "h"
UNIT_SERVICE = "usł"
UNIT_PIECE = "szt"

INVOICE_NUMBER_PREFIX = "AUDATEX/"

_WHITESPACE = re.compile(r"\s+")


def _unit(*candidates: Any, default: str) -> str:
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return default


def _text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value).strip() or None


def _resolve_vat_rate(final_calc: Any) -> float:
    rate = first_present(
        parse_number(dig(final_calc, "GrandTotal", "TaxPC")),
        parse_number(dig(final_calc, "GrandTotal", "Taxes", "Tax", "PC")),
    )
    if rate is None or not 0 <= rate <= 100:
        return DEFAULT_VAT_RATE
    return round_currency(rate)


class _ItemCollector:
    """Accumulates items, rounding qty/unit_net/vat_rate on the way in."""

    def __init__(self, vat_rate: float):
        self.vat_rate = vat_rate
        self.items: list[InvoiceItem] = []

    def add(
        self,
        name: str,
        qty: float,
        uom: str,
        unit_net: float,
        code: str | None = None,
        kjc: str | None = None,
    ) -> None:
        self.items.append(
            InvoiceItem(
                name=name,
                code=code,
                kjc=kjc,
                qty=round_currency(qty),
                uom=uom,
                unit_net=round_currency(unit_net),
                vat_rate=round_currency(self.vat_rate),
            )
        )

    def add_service(
        self,
        label: str,
        amount: float,
        quantity: float | None = None,
        unit: str = UNIT_SERVICE,
    ) -> None:
        total = round_currency(amount)
        if total <= 0:
            return
        qty = quantity if quantity is not None and quantity > 0 else 1.0
        self.add(label, qty, unit, round_currency(total / qty))

    def add_part(self, part: Any) -> None:
        if not isinstance(part, Mapping):
            return
        total = parse_amount(part.get("Price"))
        if total <= 0:
            return

        raw_qty = parse_number(part.get("Qty"))
        qty = raw_qty if raw_qty is not None and raw_qty > 0 else 1.0
        part_no = _text(part.get("PartNo"))

        self.add(
            name=_text(part.get("PartDesc")) or part_no or PART_FALLBACK_NAME,
            qty=qty,
            uom=_unit(dig(part, "Qty", "Unit"), default=UNIT_PIECE),
            unit_net=round_currency(total / qty),
            code=part_no,
            kjc=_text(part.get("RepTyp")),
        )


def _collect_items(calculation: Mapping[str, Any]) -> list[InvoiceItem]:
    final_calc = calculation.get("FinalCalc") or {}
    collector = _ItemCollector(_resolve_vat_rate(final_calc))

    # Labor
    labor_records = as_list(
        first_present(
            dig(final_calc, "FCLabor", "LaborRates", "LaborResults"),
            dig(calculation, "Labor", "PartComposits", "PartComposit"),
        )
    )
    first_labor = labor_records[0] if labor_records else None
    labor_hours = first_present(
        parse_number(dig(first_labor, "HrNo")),
        parse_number(dig(first_labor, "WuNetHrNo")),
        parse_number(dig(final_calc, "FCLabor", "LaborRates", "LaborResults", "HrNo")),
    )
    collector.add_service(
        LABOR_LABEL,
        parse_amount(dig(final_calc, "FCLabor", "Tot")),
        labor_hours,
        _unit(
            dig(first_labor, "HrNo", "Unit"),
            dig(first_labor, "WuNetHrNo", "Unit"),
            default=UNIT_HOUR,
        ),
    )

    # Additional costs
    collector.add_service(
        ADDITIONAL_COSTS_LABEL,
        parse_amount(dig(final_calc, "FCAdditionalCost", "Tot")),
    )

    # Painting
    paint = calculation.get("Paint")
    collector.add_service(
        PAINT_LABEL,
        parse_amount(dig(final_calc, "FCPaint", "PaintTotOverAll")),
        first_present(
            parse_number(dig(paint, "PaintTotLbr", "TotStd")),
            parse_number(dig(paint, "PaintPreparations", "PntPrep", "HrNo")),
        ),
        _unit(
            dig(paint, "PaintTotLbr", "TotStd", "Unit"),
            dig(paint, "PaintPreparations", "PntPrep", "HrNo", "Unit"),
            default=UNIT_HOUR,
        ),
    )

    # Spare parts
    for part in as_list(dig(calculation, "SpareParts", "PartDtls", "PartDtl")):
        collector.add_part(part)

    # Sundry surcharge on parts
    sundry = round_currency(
        parse_amount(dig(final_calc, "FCPart", "FCSundry", "PCofParts", "PCofPart", "Amnt"))
    )
    if sundry > 0:
        collector.add(SUNDRY_LABEL, 1, UNIT_SERVICE, sundry)

    return collector.items


def _describe_vehicle(entry: Mapping[str, Any]) -> str | None:
    identification = dig(entry, "Vehicle", "VehicleIdentification")
    parts = [
        clean_text(dig(identification, "ManufacturerName")),
        clean_text(dig(identification, "SubModelName"))
        or clean_text(dig(identification, "ModelName")),
        clean_text(dig(entry, "Vehicle", "VehicleAdmin", "PlateNumber")),
    ]
    present = [part for part in parts if part]
    return " ".join(present) if present else None


def _build_notes(entry: Mapping[str, Any], calculation: Mapping[str, Any]) -> str | None:
    notes = []
    run_desc = _text(calculation.get("RunDesc"))
    if run_desc:
        notes.append(f"Źródło kalkulacji: {run_desc}")
    damage_points = clean_text(dig(entry, "Vehicle", "VehicleDamage", "DamagePoints"))
    if damage_points:
        notes.append(f"Punkty uszkodzeń: {damage_points}")
    return "\n".join(notes) if notes else None


def parse_calculation_export(payload: Any) -> CalculationImport:
    """
    Parse a calculation export into invoice items and metadata.

    Args:
        payload: Decoded JSON, either one export entry or a list of them.
            Only the first entry is used.

    Returns:
        CalculationImport with services (labor, additional costs, painting)
        followed by spare parts and the sundry surcharge.

    Raises:
        InvalidCalculationFormatError: No first entry, or it is not an object.
        MissingCalculationSectionError: The entry has no Calculation key, or it is null.
        NoImportableItemsError: Nothing with a positive amount was found,
            including when the Calculation section is empty or not an object.
    """
    entries = payload if isinstance(payload, list) else [payload]
    entry = entries[0] if entries else None
    if not isinstance(entry, Mapping):
        raise InvalidCalculationFormatError(received=type(entry).__name__)

    calculation = entry.get("Calculation")
    if calculation is None:
        raise MissingCalculationSectionError(keys=sorted(str(key) for key in entry))
    if not isinstance(calculation, Mapping):
        calculation = {}

    items = _collect_items(calculation)
    if not items:
        raise NoImportableItemsError()

    claim_number = clean_text(entry.get("ClaimID"))
    invoice_number = (
        INVOICE_NUMBER_PREFIX + _WHITESPACE.sub("", claim_number) if claim_number else None
    )

    result = CalculationImport(
        items=items,
        claim_number=claim_number,
        vehicle=_describe_vehicle(entry),
        document_notes=_build_notes(entry, calculation),
        invoice_number=invoice_number,
    )

    logger.info(
        "calculation_import_parsed",
        items=len(items),
        claim_number=claim_number,
        vat_rate=items[0].vat_rate,
    )
    return result


def apply_calculation_import(
    draft: Mapping[str, Any] | InvoiceDraft,
    imported: CalculationImport,
) -> dict[str, Any]:
    """Merge an import into invoice form data.

    Items are replaced. Claim number and vehicle are overwritten only when
    the import carries them, notes are appended to existing notes, and the
    suggested invoice number is used only when the form has none.
    """
    data = draft.model_dump(mode="json") if isinstance(draft, InvoiceDraft) else dict(draft)

    data["items"] = [item.model_dump(mode="json", exclude_none=True) for item in imported.items]

    if imported.claim_number:
        data["claim_number"] = imported.claim_number
    if imported.vehicle:
        data["vehicle"] = imported.vehicle

    if imported.document_notes:
        existing = (data.get("document_notes") or "").strip()
        data["document_notes"] = (
            f"{existing}\n{imported.document_notes}" if existing else imported.document_notes
        )

    if imported.invoice_number and not (data.get("invoice_number") or "").strip():
        data["invoice_number"] = imported.invoice_number

    return data
