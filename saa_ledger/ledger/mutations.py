"""
Copy-with-replacement edits on control and project snapshots.

Every helper returns a NEW snapshot and, for controls, re-runs the
aggregator so derived fields can never drift from the payment set.
"""

from saa_ledger.ledger.aggregator import refresh_control
from saa_ledger.models.project import (
    FinancialData,
    MonthlyControl,
    Payment,
    Project,
)


class PaymentNotFoundError(KeyError):
    """Raised when updating a payment that is not in the control."""
    pass


def add_payment(control: MonthlyControl, payment: Payment) -> MonthlyControl:
    """Append a payment (insertion order is kept)."""
    return refresh_control(
        control.model_copy(update={"payments": control.payments + (payment,)})
    )


def update_payment(control: MonthlyControl, payment: Payment) -> MonthlyControl:
    """Replace the payment with the same id."""
    if not any(p.id == payment.id for p in control.payments):
        raise PaymentNotFoundError(payment.id)

    payments = tuple(payment if p.id == payment.id else p for p in control.payments)
    return refresh_control(control.model_copy(update={"payments": payments}))


def remove_payment(control: MonthlyControl, payment_id: str) -> MonthlyControl:
    """Drop a payment by id. Unknown ids leave the payment set unchanged."""
    payments = tuple(p for p in control.payments if p.id != payment_id)
    return refresh_control(control.model_copy(update={"payments": payments}))


def update_financials(
    control: MonthlyControl,
    financials: FinancialData,
) -> MonthlyControl:
    """
    Store user-edited financials.

    Derived subtotals in the submitted data are discarded and recomputed.
    """
    return refresh_control(control.model_copy(update={"financials": financials}))


def replace_control(project: Project, control: MonthlyControl) -> Project:
    """Replace the control with the same id, or append it when new."""
    controls = project.monthly_controls
    if any(c.id == control.id for c in controls):
        controls = tuple(control if c.id == control.id else c for c in controls)
    else:
        controls = controls + (control,)
    return project.model_copy(update={"monthly_controls": controls})


def remove_control(project: Project, control_id: str) -> Project:
    """Drop a control (with its payments and financials) by id."""
    controls = tuple(c for c in project.monthly_controls if c.id != control_id)
    return project.model_copy(update={"monthly_controls": controls})
