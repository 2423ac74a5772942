"""
Tests for SAA Ledger models

Test strategy:
1. Unit tests for individual components (models, normalizer, aggregator)
2. Flow tests for the orchestrator (no network, in-memory artifacts)
"""

import pytest
from decimal import Decimal

from pydantic import ValidationError

from saa_ledger.config import AppSettings, ExportSettings, validate_all_settings
from saa_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from saa_ledger.models.grid import CellType, GridCell, MergeRange, SheetGrid
from saa_ledger.models.project import (
    FinancialData,
    MonthlyControl,
    Payment,
    Project,
    ReservedCategory,
)


class TestLedgerModels:
    """Tests for payment, financials, control and project models."""

    def test_payment_loads_editor_keys(self):
        """Test that records using the editor's camelCase keys load."""
        payment = Payment.model_validate({
            "id": "abc",
            "SAA": "007",
            "dataVencimento": "2024-03-01",
            "valor": "1500.25",
            "tipoDespesa": "Estornos",
            "CNPJ_FORNECEDOR": "00.000.000/0001-00",
            "pix": "chave@pix",
        })
        assert payment.saa_number == "007"
        assert payment.due_date == "2024-03-01"
        assert payment.amount == "1500.25"
        assert payment.supplier_tax_id == "00.000.000/0001-00"
        assert payment.pix_key == "chave@pix"

    def test_payment_accepts_field_names(self):
        """Test that snake_case names work too."""
        payment = Payment(amount="10", expense_type="Outros")
        assert payment.amount == "10"
        assert payment.due_date == ""

    def test_numeric_input_becomes_text(self):
        """Test that numbers typed into text fields are kept as text."""
        payment = Payment.model_validate({"valor": 100.5, "valorPago": 7})
        assert payment.amount == "100.5"
        assert payment.amount_paid == "7"

    def test_text_is_not_stripped(self):
        """Test that category tags keep surrounding whitespace."""
        payment = Payment(expense_type=" Estornos ")
        assert payment.expense_type == " Estornos "
        assert payment.is_reserved is False

    def test_payment_is_immutable(self):
        """Test that snapshots cannot be mutated in place."""
        payment = Payment(amount="10")
        with pytest.raises(ValidationError):
            payment.amount = "20"

    def test_payment_ids_are_unique(self):
        """Test that generated ids differ."""
        assert Payment().id != Payment().id

    def test_financial_data_aliases(self):
        """Test FinancialData loading from editor keys."""
        financials = FinancialData.model_validate({
            "periodoDe": "2024-01-01",
            "saldoParcelaAnterior": "200",
            "taxasBancarias": "5",
            "dataExtrato": "2024-01-31",
        })
        assert financials.period_start == "2024-01-01"
        assert financials.prior_balance == "200"
        assert financials.bank_fees == "5"
        assert financials.subtotal(ReservedCategory.BANK_FEES) == "5"

    def test_project_with_controls(self):
        """Test nested project loading keeps control order."""
        project = Project.model_validate({
            "tituloProjeto": "Projeto",
            "monthlyControls": [
                {"id": "a", "name": "Janeiro", "payments": [{"valor": "1"}]},
                {"id": "b", "name": "Fevereiro"},
            ],
        })
        assert project.title == "Projeto"
        assert [c.id for c in project.monthly_controls] == ["a", "b"]
        assert isinstance(project.monthly_controls[0].payments, tuple)
        assert project.monthly_controls[1].financials == FinancialData()

    def test_control_defaults(self):
        """Test an empty control."""
        control = MonthlyControl(name="Março")
        assert control.payments == ()
        assert control.financials.period_start == ""


class TestReservedCategories:
    """Tests for the reserved expense category enum."""

    def test_values(self):
        """Test the exact reserved tags."""
        assert [c.value for c in ReservedCategory] == [
            "Taxas Bancarias",
            "Estornos",
            "Aplicação Financeira",
            "Pagamento indevido",
        ]

    def test_financial_fields(self):
        """Test that each category maps to its FinancialData field."""
        assert ReservedCategory.BANK_FEES.financial_field == "bank_fees"
        assert ReservedCategory.REVERSALS.financial_field == "reversals"
        assert ReservedCategory.FINANCIAL_APPLICATION.financial_field == "financial_application"
        assert ReservedCategory.IMPROPER_PAYMENT.financial_field == "improper_payment"

    def test_matching_is_exact(self):
        """Test that matching is case-sensitive."""
        assert ReservedCategory.matches("Estornos")
        assert not ReservedCategory.matches("estornos")
        assert not ReservedCategory.matches("Taxas Bancárias")


class TestGridModels:
    """Tests for cell-grid models."""

    def test_money_cell(self):
        """Test numeric cell creation."""
        cell = GridCell.money(Decimal("10.50"), "R$ #,##0.00")
        assert cell.cell_type == CellType.NUMBER
        assert cell.literal == "10.50"

    def test_numeric_cell_requires_decimal(self):
        """Test that numeric cells reject text values."""
        with pytest.raises(ValueError):
            GridCell(value="10", cell_type=CellType.NUMBER)

    def test_merge_range_bounds(self):
        """Test that a merge cannot end before it starts."""
        with pytest.raises(ValueError):
            MergeRange(start_row=2, start_col=3, end_row=2, end_col=1)

    def test_sheet_name_length(self):
        """Test that sheet names over 31 characters are rejected."""
        with pytest.raises(ValueError):
            SheetGrid(name="x" * 32)

    def test_cell_lookup_out_of_range(self):
        """Test SheetGrid.cell on missing positions."""
        grid = SheetGrid(name="A", rows=((GridCell.text("a"),),))
        assert grid.cell(0, 0).value == "a"
        assert grid.cell(0, 5) is None
        assert grid.cell(3, 0) is None


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.CSV_EXPORTED,
            description="CSV exported",
        )
        assert event.event_type == AuditEventType.CSV_EXPORTED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.csv_exported(
            control_id="c1",
            filename="Projeto_Janeiro.csv",
            row_count=3,
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "csv_exported"
        assert log_dict["entity_id"] == "c1"
        assert log_dict["details"]["row_count"] == 3

    def test_export_skipped_is_warning(self):
        """Test severity of skipped exports."""
        event = AuditEventBuilder.export_skipped_empty(
            entity_type="project",
            entity_id="p1",
            reason="Nada a exportar",
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.details["reason"] == "Nada a exportar"

    def test_export_failed_carries_error(self):
        """Test that failures keep the error message."""
        event = AuditEventBuilder.export_failed(
            entity_type="project",
            entity_id="p1",
            artifact="Projeto_completo.xlsx",
            error_message="disk full",
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"


class TestSettings:
    """Tests for configuration."""

    def test_export_defaults(self):
        """Test default export settings."""
        settings = ExportSettings()
        assert settings.csv_delimiter == ","
        assert settings.currency_format == "R$ #,##0.00"
        assert settings.sheet_name_max_length == 31
        assert settings.statement_sheet_prefix == "PC - "

    def test_app_defaults(self):
        settings = AppSettings()
        assert settings.log_level == "INFO"
        assert settings.audit_history_size == 200

    def test_env_override(self, monkeypatch):
        """Test environment variable overrides."""
        monkeypatch.setenv("SAA_EXPORT_CSV_DELIMITER", ";")
        assert ExportSettings().csv_delimiter == ";"

    def test_quote_delimiter_rejected(self):
        """Test that the quote character cannot be the delimiter."""
        with pytest.raises(ValueError):
            ExportSettings(csv_delimiter='"')

    def test_validate_all_settings(self):
        """Test the startup check."""
        results = validate_all_settings()
        assert results["export"] is True
        assert results["app"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
