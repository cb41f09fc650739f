"""
Monetary rounding and lenient number parsing.

`round_currency` is the only place amounts get rounded. Everything derived
from an amount (item net/VAT/gross, summary rows, grand totals) passes
through it, so recomputing an invoice any number of times gives the same
figures. Aggregates are summed in integer grosze via `to_cents`.
"""

import math
import re
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

_CENT = Decimal("1")
_HUNDRED = Decimal("100")

# Characters kept before parsing a numeric string ("1 234,50 zł" -> "1234,50")
_NON_NUMERIC = re.compile(r"[^0-9,.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def _to_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        # repr() is the shortest round-tripping form, so 1.005 stays 1.005
        return Decimal(repr(value))
    return None


def round_currency(value: Any) -> float:
    """Round to 2 decimal places, half away from zero.

    Non-finite or non-numeric input yields 0.
    """
    amount = _to_decimal(value)
    if amount is None:
        return 0.0
    with localcontext() as ctx:
        # quantize fails once the scaled integer outgrows the context precision
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        scaled = (amount * _HUNDRED).quantize(_CENT, rounding=ROUND_HALF_UP)
        # + 0.0 folds -0.0 into 0.0
        return float(scaled / _HUNDRED) + 0.0


def to_cents(value: Any) -> int:
    """Convert an amount to integer grosze after rounding."""
    amount = Decimal(repr(round_currency(value)))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        return int(amount * _HUNDRED)


def from_cents(cents: int) -> float:
    """Convert integer grosze back to a 2-decimal amount."""
    amount = Decimal(cents)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        return float(amount / _HUNDRED) + 0.0


def format_amount(value: Any) -> str:
    """Fixed two-decimal string used for persisted totals ("123.00")."""
    return f"{round_currency(value):.2f}"


def format_pln(value: Any) -> str:
    """Polish display format: "1 234,56 zł"."""
    text = f"{round_currency(value):,.2f}"
    return text.replace(",", " ").replace(".", ",") + " zł"


def parse_number(value: Any) -> float | None:
    """Extract a number from the shapes seen in third-party exports.

    Accepts native numbers, strings with currency/thousands noise and
    wrapper objects exposing the value under "_" or "Val". Returns None,
    not 0, when nothing numeric can be found, so callers can tell a
    missing field from a zero one.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        amount = _to_decimal(value)
        return float(amount) if amount is not None else None

    if isinstance(value, str):
        normalized = _NON_NUMERIC.sub("", value).replace(",", ".")
        if not normalized:
            return None
        # Longest numeric prefix: "1.234.5" reads as 1.234
        match = _LEADING_NUMBER.match(normalized)
        if match is None:
            return None
        try:
            parsed = float(match.group(0))
        except (ValueError, InvalidOperation):
            return None
        return parsed if math.isfinite(parsed) else None

    if isinstance(value, Mapping):
        if "_" in value:
            return parse_number(value["_"])
        if "Val" in value:
            return parse_number(value["Val"])

    return None


def parse_amount(value: Any) -> float:
    """parse_number with a missing value read as 0."""
    parsed = parse_number(value)
    return parsed if parsed is not None else 0.0
