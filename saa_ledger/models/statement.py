"""
Reconciliation Statement Models

The statement is an ordered list of rows. Each row carries a kind that
renderers use for layout (merges, emphasis) and a list of cells that are
text, money (Decimal) or empty.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from saa_ledger.models.project import Payment, ReservedCategory


StatementCell = Union[str, Decimal, None]


class RowKind(str, Enum):
    """Layout role of a statement row."""
    TITLE = "title"          # Report title
    HEADER = "header"        # Project header block
    BLANK = "blank"          # Spacer
    SECTION = "section"      # "1. Receitas" / "2. Despesas"
    COLUMNS = "columns"      # Column captions of the itemized expense listing
    VALUE = "value"          # Label + single amount
    ITEM = "item"            # Category + description + amount
    CLOSING = "closing"      # Final balance lines


class StatementRow(BaseModel):
    """A single row of the reconciliation statement."""
    model_config = ConfigDict(frozen=True)

    kind: RowKind
    cells: tuple[StatementCell, ...] = Field(default_factory=tuple)

    @property
    def label(self) -> Optional[str]:
        """First cell when it is text."""
        if self.cells and isinstance(self.cells[0], str):
            return self.cells[0]
        return None

    @property
    def amount(self) -> Optional[Decimal]:
        """Last monetary cell of the row, if any."""
        for cell in reversed(self.cells):
            if isinstance(cell, Decimal):
                return cell
        return None


class StatementTotals(BaseModel):
    """
    Computed figures of a statement.

    total_expenses covers ALL payments, including reserved categories.
    The itemized listing excludes reserved categories because they are
    shown as subtotals; the total is reconciled against the full set.
    """
    model_config = ConfigDict(frozen=True)

    total_approved: Decimal
    installment_received: Decimal
    prior_balance: Decimal
    available_to_spend: Decimal
    total_expenses: Decimal
    computed_closing_balance: Decimal
    total_revenue: Decimal
    special_subtotals: dict[ReservedCategory, Decimal]
    project_balance: Decimal
    bank_statement_balance: Decimal
    investment_statement_balance: Decimal
    final_difference: Decimal


class ReconciliationStatement(BaseModel):
    """Fully itemized accountability statement for one monthly control."""
    model_config = ConfigDict(frozen=True)

    project_title: str
    control_name: str
    report_date: date
    totals: StatementTotals
    ordinary_payments: tuple[Payment, ...] = Field(default_factory=tuple)
    rows: tuple[StatementRow, ...] = Field(default_factory=tuple)

    def rows_of_kind(self, kind: RowKind) -> list[StatementRow]:
        return [row for row in self.rows if row.kind == kind]
