"""
Export Package

CSV and cell-grid/XLSX encoders for payment lists and reconciliation
statements.
"""

from saa_ledger.exports.csv_export import (
    PAYMENT_HEADERS,
    UTF8_BOM,
    csv_download_bytes,
    decode_csv_table,
    encode_payments_csv,
    escape_cell,
    payment_to_row,
)
from saa_ledger.exports.errors import EmptyExportError, ExportError
from saa_ledger.exports.grid import (
    build_payment_sheet,
    build_project_workbook,
    build_statement_sheet,
    clean_sheet_name,
    unique_sheet_name,
)
from saa_ledger.exports.xlsx import XLSX_MEDIA_TYPE, build_workbook, render_xlsx

__all__ = [
    # CSV
    "PAYMENT_HEADERS",
    "UTF8_BOM",
    "csv_download_bytes",
    "decode_csv_table",
    "encode_payments_csv",
    "escape_cell",
    "payment_to_row",
    # Errors
    "EmptyExportError",
    "ExportError",
    # Grids
    "build_payment_sheet",
    "build_project_workbook",
    "build_statement_sheet",
    "clean_sheet_name",
    "unique_sheet_name",
    # XLSX
    "XLSX_MEDIA_TYPE",
    "build_workbook",
    "render_xlsx",
]
