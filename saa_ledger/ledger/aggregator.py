"""
Ledger Aggregator

Refreshes the derived fields of a control's FinancialData from its
payments:

1. Period auto-fill: period_start/period_end take the earliest/latest
   payment due date, but ONLY while they are empty.
2. Reserved subtotals: each reserved category's subtotal is the sum of
   the amounts of payments tagged exactly with it. These fields are
   ALWAYS overwritten.

DESIGN DECISION: Aggregation is an explicit, pure step. Callers run it
after every change to a control's payments or financials (see
saa_ledger.ledger.mutations). Running it twice gives the same result.
"""

from decimal import Decimal
from typing import Iterable

from saa_ledger.ledger.normalizer import ZERO, normalize, parse_date
from saa_ledger.models.project import (
    FinancialData,
    MonthlyControl,
    Payment,
    ReservedCategory,
)


def category_total(payments: Iterable[Payment], category: str) -> Decimal:
    """Sum of normalized amounts of payments whose tag equals category exactly."""
    return sum(
        (normalize(p.amount) for p in payments if p.expense_type == category),
        ZERO,
    )


def reserved_subtotals(payments: Iterable[Payment]) -> dict[ReservedCategory, Decimal]:
    """Subtotal of every reserved category over a payment set."""
    snapshot = tuple(payments)
    return {
        category: category_total(snapshot, category.value)
        for category in ReservedCategory
    }


def aggregate_financials(
    payments: Iterable[Payment],
    financials: FinancialData,
) -> FinancialData:
    """
    Return financials with the derived fields refreshed from payments.

    The input objects are not modified.
    """
    snapshot = tuple(payments)
    updates: dict[str, str] = {}

    if not financials.period_start or not financials.period_end:
        due_dates = [
            d for d in (parse_date(p.due_date) for p in snapshot) if d is not None
        ]
        if due_dates:
            if not financials.period_start:
                updates["period_start"] = min(due_dates).isoformat()
            if not financials.period_end:
                updates["period_end"] = max(due_dates).isoformat()

    for category, total in reserved_subtotals(snapshot).items():
        updates[category.financial_field] = format(total, "f")

    return financials.model_copy(update=updates)


def refresh_control(control: MonthlyControl) -> MonthlyControl:
    """Return the control with its financials re-aggregated."""
    financials = aggregate_financials(control.payments, control.financials)
    return control.model_copy(update={"financials": financials})
