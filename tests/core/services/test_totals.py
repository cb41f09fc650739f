"""Unit tests for the invoice totals engine."""

import pytest

from faktura.core.entities import InvoiceDraft, InvoiceItem
from faktura.core.money import to_cents
from faktura.core.services import (
    LineAmounts,
    calculate_items,
    calculate_line,
    compute_totals,
    sum_totals,
    summarize_vat,
)


def _item(**kwargs) -> InvoiceItem:
    data = {"name": "Pozycja", "qty": 1, "uom": "szt", "unit_net": 0, "vat_rate": 23}
    data.update(kwargs)
    return InvoiceItem(**data)


def _line(rate: float, net: float, vat: float) -> LineAmounts:
    return LineAmounts(qty=1, unit_net=net, vat_rate=rate, net=net, vat=vat, gross=net + vat)


class TestCalculateLine:
    """Tests for calculate_line()."""

    def test_basic_line(self):
        line = calculate_line(_item(qty=2, unit_net=123.0, vat_rate=23))
        assert line.net == 246.0
        assert line.vat == 56.58
        assert line.gross == 302.58

    def test_vat_from_rounded_net(self):
        # 3 * 0.335 = 1.005 -> net 1.01; VAT 23% of 1.01 = 0.2323 -> 0.23
        line = calculate_line(_item(qty=3, unit_net=0.335, vat_rate=23))
        assert line.net == 1.01
        assert line.vat == 0.23
        assert line.gross == 1.24

    def test_net_plus_vat_equals_gross(self):
        for qty, price, rate in [(1, 0.01, 23), (7, 13.37, 8), (2.5, 99.99, 5), (0.333, 3.33, 23)]:
            line = calculate_line(_item(qty=qty, unit_net=price, vat_rate=rate))
            assert to_cents(line.net) + to_cents(line.vat) == to_cents(line.gross)

    def test_net_override(self):
        line = calculate_line(_item(qty=2, unit_net=100, vat_rate=23, net=150))
        assert line.net == 150
        assert line.vat == 34.5
        assert line.gross == 184.5

    def test_vat_from_gross_minus_net(self):
        line = calculate_line(_item(qty=1, unit_net=100, vat_rate=23, net=100, gross=108))
        assert line.vat == 8
        assert line.gross == 108

    def test_explicit_vat_wins(self):
        line = calculate_line(_item(qty=1, unit_net=100, vat_rate=23, vat=10))
        assert line.vat == 10
        assert line.gross == 110

    def test_mapping_with_unparsable_values(self):
        line = calculate_line({"qty": "abc", "unit_net": "12,50", "vat_rate": None})
        assert line.qty == 0
        assert line.unit_net == 12.5
        assert line.vat_rate == 0
        assert line.net == 0
        assert line.gross == 0

    def test_mapping_with_string_amounts(self):
        line = calculate_line({"qty": "2", "unit_net": "1 000,00 zł", "vat_rate": "8"})
        assert line.net == 2000
        assert line.vat == 160
        assert line.gross == 2160


class TestSummarizeVat:
    """Tests for summarize_vat()."""

    def test_groups_ordered_by_rate_desc(self):
        rows = summarize_vat(
            [_line(8, 100, 8), _line(23, 100, 23), _line(0, 50, 0), _line(23, 10, 2.3), _line(5, 20, 1)]
        )
        assert [r.rate for r in rows] == [23, 8, 5, 0]
        assert rows[0].net == 110
        assert rows[0].vat == 25.3
        assert rows[0].gross == 135.3

    def test_non_positive_groups_omitted(self):
        rows = summarize_vat([_line(23, 100, 23), _line(8, 0, 0)])
        assert [r.rate for r in rows] == [23]

    def test_cent_accumulation(self):
        rows = summarize_vat([_line(23, 0.1, 0.02)] * 10)
        assert rows[0].net == 1.0
        assert rows[0].vat == 0.2

    def test_empty(self):
        assert summarize_vat([]) == []


class TestSumTotals:
    def test_sums(self):
        totals = sum_totals([_line(23, 0.1, 0.02)] * 3)
        assert totals.net == 0.3
        assert totals.vat == 0.06
        assert totals.gross == 0.36

    def test_empty(self):
        totals = sum_totals([])
        assert (totals.net, totals.vat, totals.gross) == (0, 0, 0)


class TestComputeTotals:
    """Tests for compute_totals()."""

    def test_fills_items_and_totals(self, sample_draft_data):
        draft = InvoiceDraft.model_validate(sample_draft_data)
        result = compute_totals(draft)

        assert [i.net for i in result.items] == [850.0, 300.0]
        assert [i.vat for i in result.items] == [195.5, 69.0]
        assert result.totals.net == 1150.0
        assert result.totals.vat == 264.5
        assert result.totals.gross == 1414.5
        assert len(result.vat_summary) == 1
        assert result.invoice_number == draft.invoice_number
        assert result.seller == draft.seller

    def test_mixed_rates(self, sample_draft_data):
        sample_draft_data["items"].append(
            {"name": "Holowanie", "qty": 1, "uom": "usł", "unit_net": 200, "vat_rate": 8}
        )
        result = compute_totals(InvoiceDraft.model_validate(sample_draft_data))
        assert [r.rate for r in result.vat_summary] == [23, 8]
        assert result.totals.gross == pytest.approx(1414.5 + 216)

    def test_idempotent(self, sample_draft_data):
        sample_draft_data["items"].append(
            {"name": "Uszczelka", "qty": 3, "uom": "szt", "unit_net": 0.335, "vat_rate": 23}
        )
        first = compute_totals(InvoiceDraft.model_validate(sample_draft_data))
        second = compute_totals(first)
        assert second.items == first.items
        assert second.totals == first.totals
        assert second.vat_summary == first.vat_summary

    def test_does_not_mutate_input(self, sample_draft_data):
        draft = InvoiceDraft.model_validate(sample_draft_data)
        compute_totals(draft)
        assert draft.items[0].net is None

    def test_very_large_amounts(self, sample_draft_data):
        sample_draft_data["items"] = [
            {"name": "Flota", "qty": 1e14, "uom": "szt", "unit_net": 1e13, "vat_rate": 23}
        ]
        result = compute_totals(InvoiceDraft.model_validate(sample_draft_data))
        assert result.totals.net == 1e27
        assert result.totals.vat == pytest.approx(2.3e26)
        assert result.totals.gross == pytest.approx(1.23e27)

    def test_totals_equal_sum_of_summary(self, sample_draft_data):
        sample_draft_data["items"].append(
            {"name": "Olej", "qty": 4.5, "uom": "l", "unit_net": 33.33, "vat_rate": 8}
        )
        result = compute_totals(InvoiceDraft.model_validate(sample_draft_data))
        assert sum(to_cents(r.gross) for r in result.vat_summary) == to_cents(result.totals.gross)


class TestCalculateItems:
    def test_pairs_copies_with_amounts(self):
        item = _item(qty=2, unit_net=10)
        [(copy, amounts)] = calculate_items([item])
        assert copy is not item
        assert copy.net == 20
        assert amounts.gross == 24.6
