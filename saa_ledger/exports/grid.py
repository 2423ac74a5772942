"""
Cell-Grid Builders

Turns payment lists and reconciliation statements into SheetGrid objects:

PAYMENT SHEET:
- Same 16 columns as the CSV export
- Money cells are numeric with the currency display format
- Column width = widest literal cell text + padding

STATEMENT SHEET:
- One grid row per statement row
- Money cells are numeric with the currency display format
- Title merged across the first six columns, project header values
  merged across columns B:C
- Fixed column widths

WORKBOOK:
- For every control: payment sheet, then statement sheet ("PC - " prefix)
- Sheet names cleaned of illegal characters, truncated and de-duplicated
"""

import re
from datetime import date
from typing import Optional

from saa_ledger.config import ExportSettings, get_settings
from saa_ledger.exports.csv_export import (
    AMOUNT_COLUMN,
    AMOUNT_PAID_COLUMN,
    PAYMENT_HEADERS,
    payment_to_row,
)
from saa_ledger.ledger.aggregator import refresh_control
from saa_ledger.ledger.formatting import to_money
from saa_ledger.models.grid import GridCell, MergeRange, SheetGrid
from saa_ledger.models.project import MonthlyControl, Project
from saa_ledger.models.statement import ReconciliationStatement, RowKind
from saa_ledger.reports.statement import build_statement


ILLEGAL_SHEET_CHARS = re.compile(r'[\\/*?:\[\]"<>|]')
DEFAULT_SHEET_NAME = "Controle"
RESERVED_SHEET_NAMES = {"history"}

TITLE_MERGE_COLUMNS = 6
HEADER_MERGE = (1, 2)  # columns B:C

BOLD_KINDS = {RowKind.TITLE, RowKind.SECTION, RowKind.COLUMNS, RowKind.CLOSING}


def _export_settings(settings: Optional[ExportSettings]) -> ExportSettings:
    return settings or get_settings().export


# =============================================================================
# SHEET NAMES
# =============================================================================

def clean_sheet_name(name: str, max_length: int = 31) -> str:
    """
    Strip characters the workbook format rejects and truncate.

    Empty results and names Excel reserves fall back to DEFAULT_SHEET_NAME.
    """
    cleaned = ILLEGAL_SHEET_CHARS.sub("", name).strip("'")
    cleaned = cleaned[:max_length].strip("'")
    if not cleaned or cleaned.strip().lower() in RESERVED_SHEET_NAMES:
        return DEFAULT_SHEET_NAME
    return cleaned


def unique_sheet_name(name: str, taken: set[str], max_length: int = 31) -> str:
    """
    Make a cleaned name unique among taken names (case-insensitive).

    Collisions get a " (2)", " (3)"... suffix, truncating the base so the
    result still fits max_length. The chosen name is added to taken.
    """
    candidate = name
    counter = 2
    while candidate.lower() in taken:
        suffix = f" ({counter})"
        candidate = name[:max_length - len(suffix)] + suffix
        counter += 1
    taken.add(candidate.lower())
    return candidate


# =============================================================================
# PAYMENT SHEET
# =============================================================================

def _column_widths(rows: list[list[Optional[GridCell]]], padding: int) -> tuple[int, ...]:
    width = max(len(row) for row in rows)
    return tuple(
        max(
            (len(row[col].literal) for row in rows if col < len(row) and row[col]),
            default=0,
        ) + padding
        for col in range(width)
    )


def build_payment_sheet(
    control: MonthlyControl,
    name: str,
    settings: Optional[ExportSettings] = None,
) -> SheetGrid:
    """Payment table of a control as a grid. No payments: header row only."""
    settings = _export_settings(settings)

    rows: list[list[Optional[GridCell]]] = [
        [GridCell.text(header, bold=True) for header in PAYMENT_HEADERS]
    ]
    for payment in control.payments:
        row: list[Optional[GridCell]] = [
            GridCell.text(value) if value else None for value in payment_to_row(payment)
        ]
        row[AMOUNT_COLUMN] = GridCell.money(
            to_money(payment.amount), settings.currency_format
        )
        row[AMOUNT_PAID_COLUMN] = GridCell.money(
            to_money(payment.amount_paid), settings.currency_format
        )
        rows.append(row)

    return SheetGrid(
        name=name,
        rows=tuple(tuple(row) for row in rows),
        column_widths=_column_widths(rows, settings.column_width_padding),
    )


# =============================================================================
# STATEMENT SHEET
# =============================================================================

def build_statement_sheet(
    statement: ReconciliationStatement,
    name: str,
    settings: Optional[ExportSettings] = None,
) -> SheetGrid:
    """Reconciliation statement as a grid with merges and fixed widths."""
    settings = _export_settings(settings)

    rows: list[tuple[Optional[GridCell], ...]] = []
    merges: list[MergeRange] = []

    for index, statement_row in enumerate(statement.rows):
        bold = statement_row.kind in BOLD_KINDS
        cells: list[Optional[GridCell]] = []
        for value in statement_row.cells:
            if value is None:
                cells.append(None)
            elif isinstance(value, str):
                cells.append(GridCell.text(value, bold=bold))
            else:
                cells.append(GridCell.money(value, settings.currency_format))
        rows.append(tuple(cells))

        if statement_row.kind == RowKind.TITLE:
            merges.append(MergeRange(
                start_row=index, start_col=0,
                end_row=index, end_col=TITLE_MERGE_COLUMNS - 1,
            ))
        elif statement_row.kind == RowKind.HEADER and _mergeable_header(cells):
            start, end = HEADER_MERGE
            merges.append(MergeRange(
                start_row=index, start_col=start, end_row=index, end_col=end,
            ))

    return SheetGrid(
        name=name,
        rows=tuple(rows),
        merges=tuple(merges),
        column_widths=tuple(settings.statement_column_widths),
    )


def _mergeable_header(cells: list[Optional[GridCell]]) -> bool:
    """B:C merges only when C is empty, so no value gets hidden."""
    start, end = HEADER_MERGE
    return len(cells) > start and all(
        col >= len(cells) or cells[col] is None for col in range(start + 1, end + 1)
    )


# =============================================================================
# WORKBOOK
# =============================================================================

def build_project_workbook(
    project: Project,
    report_date: Optional[date] = None,
    settings: Optional[ExportSettings] = None,
) -> list[SheetGrid]:
    """
    All sheets of a project's workbook, in order.

    Controls are re-aggregated before their statements are built.
    """
    settings = _export_settings(settings)
    max_length = settings.sheet_name_max_length
    taken: set[str] = set()
    sheets: list[SheetGrid] = []

    for control in project.monthly_controls:
        control = refresh_control(control)
        base = clean_sheet_name(control.name, max_length)

        payment_name = unique_sheet_name(base, taken, max_length)
        statement_name = unique_sheet_name(
            clean_sheet_name(settings.statement_sheet_prefix + base, max_length),
            taken,
            max_length,
        )

        sheets.append(build_payment_sheet(control, payment_name, settings))
        statement = build_statement(project, control, report_date)
        sheets.append(build_statement_sheet(statement, statement_name, settings))

    return sheets
