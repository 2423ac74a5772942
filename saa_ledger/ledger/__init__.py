"""Ledger package: normalization, aggregation and snapshot edits."""

from saa_ledger.ledger.aggregator import (
    aggregate_financials,
    category_total,
    refresh_control,
    reserved_subtotals,
)
from saa_ledger.ledger.formatting import (
    format_br_date,
    format_brl,
    format_decimal_comma,
    to_money,
)
from saa_ledger.ledger.mutations import (
    PaymentNotFoundError,
    add_payment,
    remove_control,
    remove_payment,
    replace_control,
    update_financials,
    update_payment,
)
from saa_ledger.ledger.normalizer import normalize, parse_date

__all__ = [
    # Normalization
    "normalize",
    "parse_date",
    # Formatting
    "format_br_date",
    "format_brl",
    "format_decimal_comma",
    "to_money",
    # Aggregation
    "aggregate_financials",
    "category_total",
    "refresh_control",
    "reserved_subtotals",
    # Snapshot edits
    "PaymentNotFoundError",
    "add_payment",
    "remove_control",
    "remove_payment",
    "replace_control",
    "update_financials",
    "update_payment",
]
