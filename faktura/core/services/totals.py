"""
Invoice totals engine.

Per line: net = qty * unit_net, vat = net * rate / 100, gross = net + vat,
each rounded to the grosz, with any explicit net/vat/gross on the line
taking precedence. Aggregates (VAT summary rows and grand totals) are summed
in integer grosze so that adding many lines never drifts.

The engine is pure: the same draft always gives the same result, and feeding
a result back in gives it back unchanged.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from faktura.core.entities.invoice import (
    CalculatedInvoice,
    InvoiceDraft,
    InvoiceItem,
    InvoiceTotals,
    VatSummaryRow,
)
from faktura.core.money import from_cents, parse_number, round_currency, to_cents


@dataclass(frozen=True)
class LineAmounts:
    """Resolved inputs and rounded amounts of one invoice line."""

    qty: float
    unit_net: float
    vat_rate: float
    net: float
    vat: float
    gross: float


def _read(item: InvoiceItem | Mapping[str, Any], field: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(field)
    return getattr(item, field, None)


def calculate_line(item: InvoiceItem | Mapping[str, Any]) -> LineAmounts:
    """Compute net/VAT/gross for one line.

    Unparsable qty, price or rate count as 0. An explicit net is used as is;
    VAT comes from an explicit vat, else from explicit gross - net when both
    are given, else from the rate.
    """
    qty = parse_number(_read(item, "qty")) or 0.0
    unit_net = parse_number(_read(item, "unit_net")) or 0.0
    vat_rate = parse_number(_read(item, "vat_rate")) or 0.0

    given_net = parse_number(_read(item, "net"))
    given_vat = parse_number(_read(item, "vat"))
    given_gross = parse_number(_read(item, "gross"))

    net = round_currency(given_net if given_net is not None else qty * unit_net)

    if given_vat is not None:
        vat = round_currency(given_vat)
    elif given_net is not None and given_gross is not None:
        vat = round_currency(given_gross - given_net)
    else:
        vat = round_currency(net * vat_rate / 100)

    if given_gross is not None:
        gross = round_currency(given_gross)
    else:
        gross = from_cents(to_cents(net) + to_cents(vat))

    return LineAmounts(
        qty=qty,
        unit_net=unit_net,
        vat_rate=vat_rate,
        net=net,
        vat=vat,
        gross=gross,
    )


def summarize_vat(lines: Iterable[LineAmounts]) -> list[VatSummaryRow]:
    """Group lines by VAT rate, highest rate first.

    Rates whose accumulated net is not positive are left out.
    """
    groups: dict[float, list[int]] = {}
    for line in lines:
        bucket = groups.setdefault(line.vat_rate, [0, 0, 0])
        bucket[0] += to_cents(line.net)
        bucket[1] += to_cents(line.vat)
        bucket[2] += to_cents(line.gross)

    return [
        VatSummaryRow(
            rate=rate,
            net=from_cents(net),
            vat=from_cents(vat),
            gross=from_cents(gross),
        )
        for rate, (net, vat, gross) in sorted(groups.items(), reverse=True)
        if net > 0
    ]


def sum_totals(lines: Iterable[LineAmounts]) -> InvoiceTotals:
    """Grand totals, accumulated in grosze."""
    net = vat = gross = 0
    for line in lines:
        net += to_cents(line.net)
        vat += to_cents(line.vat)
        gross += to_cents(line.gross)
    return InvoiceTotals(net=from_cents(net), vat=from_cents(vat), gross=from_cents(gross))


def calculate_items(items: Iterable[InvoiceItem]) -> list[tuple[InvoiceItem, LineAmounts]]:
    """Pair every item with its amounts and a copy carrying them."""
    calculated = []
    for item in items:
        amounts = calculate_line(item)
        calculated.append(
            (
                item.model_copy(
                    update={
                        "qty": amounts.qty,
                        "unit_net": amounts.unit_net,
                        "vat_rate": amounts.vat_rate,
                        "net": amounts.net,
                        "vat": amounts.vat,
                        "gross": amounts.gross,
                    }
                ),
                amounts,
            )
        )
    return calculated


def compute_totals(draft: InvoiceDraft) -> CalculatedInvoice:
    """Fill in per-item amounts, the VAT summary and grand totals."""
    calculated = calculate_items(draft.items)
    lines = [amounts for _, amounts in calculated]

    fields = {name: getattr(draft, name) for name in InvoiceDraft.model_fields if name != "items"}
    return CalculatedInvoice(
        **fields,
        items=[item for item, _ in calculated],
        vat_summary=summarize_vat(lines),
        totals=sum_totals(lines),
    )
