"""Unit tests for the damage-assessment calculation import."""

import copy

import pytest

from faktura.core.entities import InvoiceDraft
from faktura.core.exceptions import (
    InvalidCalculationFormatError,
    MissingCalculationSectionError,
    NoImportableItemsError,
)
from faktura.core.services import apply_calculation_import, parse_calculation_export


@pytest.fixture
def calculation_export() -> dict:
    """A trimmed Audatex export with every section present."""
    return {
        "ClaimID": "2024/12/ 001 ",
        "Vehicle": {
            "VehicleIdentification": {
                "ManufacturerName": "Volkswagen",
                "ModelName": "Golf",
                "SubModelName": "Golf VII [5G1]  2.0 TDI",
            },
            "VehicleAdmin": {"PlateNumber": "WX 12345"},
            "VehicleDamage": {"DamagePoints": "01 [przód]  02"},
        },
        "Calculation": {
            "RunDesc": "AudaPad Web",
            "FinalCalc": {
                "GrandTotal": {"TaxPC": {"Val": "23"}},
                "FCLabor": {
                    "Tot": {"_": "480.00"},
                    "LaborRates": {
                        "LaborResults": [
                            {"HrNo": {"Val": "4", "Unit": "rbh"}},
                            {"HrNo": {"Val": "1"}},
                        ]
                    },
                },
                "FCAdditionalCost": {"Tot": "50"},
                "FCPaint": {"PaintTotOverAll": {"_": "600,00"}},
                "FCPart": {"FCSundry": {"PCofParts": {"PCofPart": {"Amnt": {"_": "12.345"}}}}},
            },
            "Paint": {"PaintTotLbr": {"TotStd": {"Val": "3", "Unit": "h"}}},
            "SpareParts": {
                "PartDtls": {
                    "PartDtl": [
                        {
                            "PartDesc": "Zderzak przedni",
                            "PartNo": "5G0807221",
                            "Price": {"_": "246.00"},
                            "Qty": {"Val": "2", "Unit": "szt"},
                            "RepTyp": "E",
                        },
                        {"PartNo": "N-123", "Price": "10"},
                        {"PartDesc": "Gratis", "Price": "0"},
                    ]
                }
            },
        },
    }


class TestParseCalculationExport:
    """Tests for parse_calculation_export()."""

    def test_item_order(self, calculation_export):
        result = parse_calculation_export(calculation_export)
        assert [i.name for i in result.items] == [
            "Robocizna",
            "Koszty dodatkowe",
            "Lakierowanie",
            "Zderzak przedni",
            "N-123",
            "Materiały dodatkowe (FCSundry)",
        ]

    def test_labor(self, calculation_export):
        labor = parse_calculation_export(calculation_export).items[0]
        assert labor.qty == 4
        assert labor.uom == "rbh"
        assert labor.unit_net == 120.0
        assert labor.vat_rate == 23

    def test_additional_costs_and_paint(self, calculation_export):
        items = parse_calculation_export(calculation_export).items
        additional, paint = items[1], items[2]
        assert (additional.qty, additional.uom, additional.unit_net) == (1, "usł", 50)
        assert (paint.qty, paint.uom, paint.unit_net) == (3, "h", 200)

    def test_part_unit_price_from_total(self, calculation_export):
        part = parse_calculation_export(calculation_export).items[3]
        assert part.qty == 2
        assert part.unit_net == 123.0
        assert part.code == "5G0807221"
        assert part.kjc == "E"
        assert part.uom == "szt"

    def test_part_fallbacks(self, calculation_export):
        part = parse_calculation_export(calculation_export).items[4]
        assert part.name == "N-123"
        assert part.qty == 1
        assert part.uom == "szt"
        assert part.unit_net == 10

    def test_zero_priced_part_skipped(self, calculation_export):
        names = [i.name for i in parse_calculation_export(calculation_export).items]
        assert "Gratis" not in names

    def test_sundry_rounded(self, calculation_export):
        sundry = parse_calculation_export(calculation_export).items[-1]
        assert sundry.unit_net == 12.35
        assert sundry.uom == "usł"

    def test_metadata(self, calculation_export):
        result = parse_calculation_export(calculation_export)
        assert result.claim_number == "2024/12/ 001"
        assert result.invoice_number == "AUDATEX/2024/12/001"
        assert result.vehicle == "Volkswagen Golf VII 2.0 TDI WX 12345"
        assert result.document_notes == (
            "Źródło kalkulacji: AudaPad Web\nPunkty uszkodzeń: 01 02"
        )

    def test_array_payload_uses_first_entry(self, calculation_export):
        other = copy.deepcopy(calculation_export)
        other["ClaimID"] = "OTHER"
        result = parse_calculation_export([calculation_export, other])
        assert result.claim_number == "2024/12/ 001"

    def test_single_part_object(self):
        payload = {
            "Calculation": {
                "SpareParts": {"PartDtls": {"PartDtl": {"PartDesc": "Lusterko", "Price": "99.99"}}}
            }
        }
        result = parse_calculation_export(payload)
        assert [i.name for i in result.items] == ["Lusterko"]
        assert result.items[0].vat_rate == 23
        assert result.claim_number is None
        assert result.invoice_number is None
        assert result.vehicle is None
        assert result.document_notes is None

    def test_vat_from_taxes_block(self, calculation_export):
        grand_total = calculation_export["Calculation"]["FinalCalc"]["GrandTotal"]
        grand_total.pop("TaxPC")
        grand_total["Taxes"] = {"Tax": {"PC": {"Val": "8"}}}
        result = parse_calculation_export(calculation_export)
        assert {i.vat_rate for i in result.items} == {8}

    @pytest.mark.parametrize("rate", ["abc", "150", "-1"])
    def test_invalid_vat_rate_falls_back_to_default(self, calculation_export, rate):
        calculation_export["Calculation"]["FinalCalc"]["GrandTotal"]["TaxPC"] = {"Val": rate}
        result = parse_calculation_export(calculation_export)
        assert {i.vat_rate for i in result.items} == {23}

    def test_labor_hours_fallback_to_part_composit(self, calculation_export):
        calc = calculation_export["Calculation"]
        calc["FinalCalc"]["FCLabor"].pop("LaborRates")
        calc["Labor"] = {"PartComposits": {"PartComposit": {"WuNetHrNo": {"Val": "6"}}}}
        labor = parse_calculation_export(calculation_export).items[0]
        assert labor.qty == 6
        assert labor.uom == "h"
        assert labor.unit_net == 80

    def test_labor_without_hours(self, calculation_export):
        calculation_export["Calculation"]["FinalCalc"]["FCLabor"].pop("LaborRates")
        labor = parse_calculation_export(calculation_export).items[0]
        assert labor.qty == 1
        assert labor.unit_net == 480

    def test_zero_services_skipped(self, calculation_export):
        final_calc = calculation_export["Calculation"]["FinalCalc"]
        final_calc["FCLabor"]["Tot"] = {"_": "0.004"}
        final_calc.pop("FCPaint")
        names = [i.name for i in parse_calculation_export(calculation_export).items]
        assert "Robocizna" not in names
        assert "Lakierowanie" not in names

    @pytest.mark.parametrize("payload", [[], None, "text", 42, ["x"]])
    def test_invalid_format(self, payload):
        with pytest.raises(InvalidCalculationFormatError) as exc_info:
            parse_calculation_export(payload)
        assert exc_info.value.message == "Nieprawidłowy format danych kalkulacji"

    @pytest.mark.parametrize("payload", [{}, {"ClaimID": "X"}, {"Calculation": None}, [{"ClaimID": "X"}]])
    def test_missing_calculation_section(self, payload):
        with pytest.raises(MissingCalculationSectionError) as exc_info:
            parse_calculation_export(payload)
        assert exc_info.value.message == "Brak sekcji Calculation w danych"

    @pytest.mark.parametrize(
        "payload",
        [
            {"Calculation": {"FinalCalc": {"FCLabor": {"Tot": "0"}}}},
            {"Calculation": {}},
            [{"Calculation": {}}],
            {"Calculation": "x"},
            {"Calculation": ["x"]},
        ],
    )
    def test_no_importable_items(self, payload):
        with pytest.raises(NoImportableItemsError) as exc_info:
            parse_calculation_export(payload)
        assert exc_info.value.message == "Nie znaleziono pozycji do zaimportowania"

    def test_huge_part_price(self):
        payload = {"Calculation": {"SpareParts": {"PartDtls": {"PartDtl": {"Price": "1" + "0" * 27}}}}}
        (part,) = parse_calculation_export(payload).items
        assert part.qty == 1
        assert part.unit_net == 1e27

    def test_garbage_values_are_not_fatal(self, calculation_export):
        calc = calculation_export["Calculation"]
        calc["FinalCalc"]["FCAdditionalCost"] = "nonsense"
        calc["Paint"] = ["unexpected"]
        calc["SpareParts"]["PartDtls"]["PartDtl"].append("not a part")
        result = parse_calculation_export(calculation_export)
        assert "Koszty dodatkowe" not in [i.name for i in result.items]
        assert len(result.items) == 5


class TestApplyCalculationImport:
    """Tests for apply_calculation_import()."""

    def test_replaces_items_and_sets_metadata(self, calculation_export, sample_draft_data):
        sample_draft_data["document_notes"] = "Naprawa po szkodzie"
        sample_draft_data["vehicle"] = None
        imported = parse_calculation_export(calculation_export)

        merged = apply_calculation_import(sample_draft_data, imported)

        assert len(merged["items"]) == len(imported.items)
        assert merged["items"][0]["name"] == "Robocizna"
        assert merged["claim_number"] == "2024/12/ 001"
        assert merged["vehicle"] == imported.vehicle
        assert merged["document_notes"].startswith("Naprawa po szkodzie\nŹródło kalkulacji")
        # Existing number is kept
        assert merged["invoice_number"] == "FV/2024/12/001"

    def test_proposes_number_when_missing(self, calculation_export, sample_draft_data):
        sample_draft_data["invoice_number"] = "  "
        merged = apply_calculation_import(
            sample_draft_data, parse_calculation_export(calculation_export)
        )
        assert merged["invoice_number"] == "AUDATEX/2024/12/001"

    def test_keeps_fields_import_lacks(self, sample_draft_data):
        payload = {"Calculation": {"FinalCalc": {"FCAdditionalCost": {"Tot": "10"}}}}
        merged = apply_calculation_import(sample_draft_data, parse_calculation_export(payload))
        assert merged["claim_number"] == "2024/12/001"
        assert merged["vehicle"] == "Volkswagen Golf WX 12345"

    def test_does_not_mutate_input(self, calculation_export, sample_draft_data):
        original_items = list(sample_draft_data["items"])
        apply_calculation_import(sample_draft_data, parse_calculation_export(calculation_export))
        assert sample_draft_data["items"] == original_items

    def test_accepts_draft_model(self, calculation_export, sample_draft_data):
        draft = InvoiceDraft.model_validate(sample_draft_data)
        merged = apply_calculation_import(draft, parse_calculation_export(calculation_export))
        assert merged["issue_date"] == "2024-12-10"
        InvoiceDraft.model_validate(merged)
