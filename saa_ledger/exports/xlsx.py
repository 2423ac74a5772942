"""
XLSX Container Writer

Writes SheetGrid objects into an .xlsx workbook with openpyxl:
cell values, number formats, bold fonts, merged ranges and column widths.
"""

import io
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from saa_ledger.models.grid import SheetGrid


XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_workbook(sheets: Iterable[SheetGrid]) -> Workbook:
    """
    Create an openpyxl workbook with one worksheet per grid.

    With no grids the default empty sheet is kept, since a workbook
    needs at least one sheet.
    """
    sheets = list(sheets)
    wb = Workbook()
    if sheets:
        wb.remove(wb.active)

    for grid in sheets:
        ws = wb.create_sheet(title=grid.name)

        for r, row in enumerate(grid.rows, start=1):
            for c, cell in enumerate(row, start=1):
                if cell is None:
                    continue
                target = ws.cell(row=r, column=c, value=cell.value)
                if cell.number_format:
                    target.number_format = cell.number_format
                if cell.bold:
                    target.font = Font(bold=True)

        for merge in grid.merges:
            ws.merge_cells(
                start_row=merge.start_row + 1,
                start_column=merge.start_col + 1,
                end_row=merge.end_row + 1,
                end_column=merge.end_col + 1,
            )

        for c, width in enumerate(grid.column_widths, start=1):
            ws.column_dimensions[get_column_letter(c)].width = width

    return wb


def render_xlsx(sheets: Iterable[SheetGrid]) -> bytes:
    """Serialize grids to .xlsx bytes."""
    buffer = io.BytesIO()
    build_workbook(sheets).save(buffer)
    return buffer.getvalue()
