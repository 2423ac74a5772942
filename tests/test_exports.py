"""Tests for the CSV, cell-grid and XLSX encoders."""

import io

import pytest
from decimal import Decimal

from openpyxl import load_workbook

from saa_ledger.config import ExportSettings
from saa_ledger.exports import (
    PAYMENT_HEADERS,
    build_payment_sheet,
    build_project_workbook,
    build_statement_sheet,
    clean_sheet_name,
    csv_download_bytes,
    decode_csv_table,
    encode_payments_csv,
    escape_cell,
    payment_to_row,
    render_xlsx,
    unique_sheet_name,
)
from saa_ledger.ledger import refresh_control
from saa_ledger.models.grid import CellType
from saa_ledger.models.project import MonthlyControl, Payment, Project
from saa_ledger.reports import build_statement


class TestCsvEncoding:
    """Tests for the delimited text export."""

    def test_header_only_when_empty(self):
        """Test that no payments gives just the header row."""
        text = encode_payments_csv([])
        assert "\n" not in text
        assert decode_csv_table(text) == [list(PAYMENT_HEADERS)]
        assert len(PAYMENT_HEADERS) == 16

    def test_row_values(self, payments):
        """Test date and money rendering."""
        row = payment_to_row(payments[0])
        assert row[0] == "F01"
        assert row[1] == "10/01/2024"
        assert row[4] == "50,00"
        assert row[10] == "11/01/2024"
        assert row[11] == "50,00"
        assert row[15] == "001"

    def test_missing_amounts_render_zero(self):
        row = payment_to_row(Payment(amount="", amount_paid="abc"))
        assert row[4] == "0,00"
        assert row[11] == "0,00"
        assert row[1] == ""

    def test_escape_rules(self):
        """Test quoting only where needed."""
        assert escape_cell("simples") == "simples"
        assert escape_cell("a,b") == '"a,b"'
        assert escape_cell('diz "oi"') == '"diz ""oi"""'
        assert escape_cell("linha\nnova") == '"linha\nnova"'
        assert escape_cell(None) == ""
        assert escape_cell("a;b", delimiter=";") == '"a;b"'
        assert escape_cell("a,b", delimiter=";") == "a,b"

    def test_amount_cells_are_quoted(self, payments):
        """Test that comma decimals get quoted with a comma delimiter."""
        line = encode_payments_csv(payments).split("\n")[1]
        assert '"50,00"' in line

    def test_rows_joined_without_trailing_newline(self, payments):
        text = encode_payments_csv(payments)
        assert not text.endswith("\n")
        assert len(text.split("\n")) == 3

    def test_round_trip(self, payments):
        """Test encode then decode reproduces every field value."""
        tricky = Payment(
            id="p3",
            amount="12.3",
            supplier_name='Fornecedor "Rápido", Ltda',
            description='Linha 1, com vírgula\nLinha 2 com "aspas"',
            notes="\r\nquebra",
        )
        source = list(payments) + [tricky]

        decoded = decode_csv_table(encode_payments_csv(source))

        assert decoded[0] == list(PAYMENT_HEADERS)
        assert decoded[1:] == [payment_to_row(p) for p in source]
        assert decoded[3][9] == 'Linha 1, com vírgula\nLinha 2 com "aspas"'

    def test_round_trip_with_semicolon(self, payments):
        decoded = decode_csv_table(encode_payments_csv(payments, ";"), ";")
        assert decoded[1:] == [payment_to_row(p) for p in payments]

    def test_download_has_bom(self):
        """Test the UTF-8 byte-order mark prefix."""
        content = csv_download_bytes("a,b")
        assert content.startswith(b"\xef\xbb\xbf")
        assert content.decode("utf-8-sig") == "a,b"
        assert decode_csv_table(content.decode("utf-8")) == [["a", "b"]]

    def test_large_amount_exports(self):
        """Test that amounts past the default decimal precision still encode."""
        decoded = decode_csv_table(encode_payments_csv([Payment(amount="1e30")]))
        assert decoded[1][4] == "1" + "0" * 30 + ",00"
        assert decoded[1][11] == "0,00"


class TestSheetNames:
    """Tests for sheet name cleanup."""

    def test_illegal_characters_removed(self):
        assert clean_sheet_name("Jan/2024: [final]?") == "Jan2024 final"
        assert clean_sheet_name('a\\b*c"d<e>f|g') == "abcdefg"

    def test_truncated(self):
        assert clean_sheet_name("x" * 40) == "x" * 31

    def test_empty_name_fallback(self):
        assert clean_sheet_name("///") == "Controle"
        assert clean_sheet_name("") == "Controle"

    def test_reserved_name_fallback(self):
        """Test that Excel's reserved History name is never used."""
        assert clean_sheet_name("History") == "Controle"
        assert clean_sheet_name("HISTORY") == "Controle"
        assert clean_sheet_name("History: 2024") == "History 2024"

    def test_unique_names(self):
        """Test case-insensitive de-duplication within the length limit."""
        taken: set[str] = set()
        assert unique_sheet_name("Janeiro", taken) == "Janeiro"
        assert unique_sheet_name("janeiro", taken) == "janeiro (2)"
        assert unique_sheet_name("Janeiro", taken) == "Janeiro (3)"

        long_name = "y" * 31
        taken = {long_name}
        result = unique_sheet_name(long_name, taken)
        assert len(result) == 31
        assert result.endswith(" (2)")


class TestPaymentSheet:
    """Tests for the payment grid."""

    def test_money_cells_are_numeric(self, control):
        grid = build_payment_sheet(control, "Janeiro", ExportSettings())
        amount = grid.cell(1, 4)
        paid = grid.cell(1, 11)

        assert amount.cell_type == CellType.NUMBER
        assert amount.value == Decimal("50.00")
        assert amount.number_format == "R$ #,##0.00"
        assert paid.value == Decimal("50.00")
        assert grid.cell(2, 11).value == Decimal("0.00")

    def test_text_cells(self, control):
        grid = build_payment_sheet(control, "Janeiro", ExportSettings())
        assert grid.cell(0, 2).value == "Nome do Fornecedor (Beneficiário)"
        assert grid.cell(0, 2).bold is True
        assert grid.cell(1, 1).value == "10/01/2024"
        assert grid.cell(2, 0) is None

    def test_column_widths(self, control):
        """Test widths = longest literal + padding."""
        grid = build_payment_sheet(control, "Janeiro", ExportSettings())

        assert len(grid.column_widths) == 16
        assert grid.column_widths[2] == len("Nome do Fornecedor (Beneficiário)") + 2
        assert grid.column_widths[9] == len("Tarifa de manutenção") + 2
        assert grid.column_widths[4] == len("Valor à Pagar (R$)") + 2

    def test_empty_control_is_header_only(self):
        grid = build_payment_sheet(MonthlyControl(), "Vazio", ExportSettings())
        assert len(grid.rows) == 1
        assert grid.column_widths[0] == len("Código Fornecedor") + 2

    def test_large_money_cell(self):
        control = MonthlyControl(payments=(Payment(amount="1e30"),))
        grid = build_payment_sheet(control, "Grande", ExportSettings())
        assert grid.cell(1, 4).value == Decimal("1e30")
        assert grid.column_widths[4] == len("1" + "0" * 30 + ".00") + 2


class TestStatementSheet:
    """Tests for the statement grid."""

    def test_merges(self, project, control, report_date):
        """Test title and header merges."""
        statement = build_statement(project, refresh_control(control), report_date)
        grid = build_statement_sheet(statement, "PC - Janeiro", ExportSettings())
        merges = {(m.start_row, m.start_col, m.end_row, m.end_col) for m in grid.merges}

        assert merges == {(0, 0, 0, 5), (1, 1, 1, 2), (2, 1, 2, 2), (3, 1, 3, 2)}

    def test_money_cells(self, project, control, report_date):
        statement = build_statement(project, refresh_control(control), report_date)
        grid = build_statement_sheet(statement, "PC - Janeiro", ExportSettings())

        assert grid.cell(6, 0).value == "TOTAL APROVADO"
        assert grid.cell(6, 1).cell_type == CellType.NUMBER
        assert grid.cell(6, 1).value == Decimal("10000")
        assert grid.cell(6, 1).number_format == "R$ #,##0.00"
        assert grid.cell(0, 0).bold is True

    def test_fixed_widths(self, project, control, report_date):
        statement = build_statement(project, control, report_date)
        grid = build_statement_sheet(statement, "PC", ExportSettings())
        assert grid.column_widths == (45, 20, 20, 20, 25, 25, 25)


class TestWorkbook:
    """Tests for the project workbook."""

    def test_sheet_pairs(self, project, report_date):
        sheets = build_project_workbook(project, report_date, ExportSettings())
        assert [s.name for s in sheets] == ["Janeiro 2024", "PC - Janeiro 2024"]

    def test_controls_are_refreshed(self, project, report_date):
        """Test that stale financials are re-aggregated for the statement."""
        sheets = build_project_workbook(project, report_date, ExportSettings())
        statement_grid = sheets[1]
        labels = [row[0].value if row and row[0] else None for row in statement_grid.rows]
        row = labels.index("Taxas Bancárias")
        assert statement_grid.cell(row, 1).value == Decimal("30")

    def test_duplicate_and_long_names(self, report_date):
        long_name = "Prestação de contas do mês de janeiro"
        project = Project(monthly_controls=(
            MonthlyControl(name=long_name),
            MonthlyControl(name=long_name),
        ))
        names = [s.name for s in build_project_workbook(project, report_date, ExportSettings())]

        assert len(names) == 4
        assert len({n.lower() for n in names}) == 4
        assert all(len(n) <= 31 for n in names)
        assert names[1].startswith("PC - ")

    def test_empty_project(self, report_date):
        assert build_project_workbook(Project(), report_date, ExportSettings()) == []

    def test_history_control_name(self, report_date):
        project = Project(monthly_controls=(MonthlyControl(name="History"),))
        names = [s.name for s in build_project_workbook(project, report_date, ExportSettings())]
        assert names == ["Controle", "PC - History"]

    def test_render_xlsx(self, project, report_date):
        """Test the written workbook declares values, formats, merges and widths."""
        sheets = build_project_workbook(project, report_date, ExportSettings())
        wb = load_workbook(io.BytesIO(render_xlsx(sheets)))

        assert wb.sheetnames == ["Janeiro 2024", "PC - Janeiro 2024"]

        payments_ws = wb["Janeiro 2024"]
        assert payments_ws["E2"].value == 50
        assert payments_ws["E2"].number_format == "R$ #,##0.00"
        assert payments_ws["A1"].font.bold is True
        assert payments_ws.column_dimensions["C"].width == len(
            "Nome do Fornecedor (Beneficiário)"
        ) + 2

        statement_ws = wb["PC - Janeiro 2024"]
        merged = {str(r) for r in statement_ws.merged_cells.ranges}
        assert "A1:F1" in merged
        assert "B2:C2" in merged
        assert statement_ws["B7"].value == 10000
        assert statement_ws["B7"].number_format == "R$ #,##0.00"
        assert statement_ws.column_dimensions["A"].width == 45

    def test_render_empty_workbook(self):
        """Test that no grids still gives a readable workbook."""
        wb = load_workbook(io.BytesIO(render_xlsx([])))
        assert len(wb.sheetnames) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
