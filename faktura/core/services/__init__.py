"""
Core business logic services.

Pure functions over core entities: calculation import parsing, invoice
totals and the spelled-out amount. No infrastructure imports.
"""

from faktura.core.services.amount_words import amount_in_words, integer_to_words, plural_form
from faktura.core.services.calculation_parser import (
    apply_calculation_import,
    parse_calculation_export,
)
from faktura.core.services.totals import (
    LineAmounts,
    calculate_items,
    calculate_line,
    compute_totals,
    sum_totals,
    summarize_vat,
)

__all__ = [
    # Calculation import
    "parse_calculation_export",
    "apply_calculation_import",
    # Totals
    "compute_totals",
    "calculate_items",
    "calculate_line",
    "summarize_vat",
    "sum_totals",
    "LineAmounts",
    # Amount in words
    "amount_in_words",
    "integer_to_words",
    "plural_form",
]
