"""
Main Orchestrator for SAA Ledger

This module ties the core components together for the calling layer:
1. Refresh (control → re-aggregated control)
2. Statement (project + control → reconciliation statement)
3. CSV export (control → BOM-prefixed CSV download)
4. Workbook export (project → .xlsx with payment + statement sheets)
5. Template fields (project + payment → flat document mapping)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Exports never run on stale derived fields (controls are refreshed first)
- Empty targets are refused with a user-facing message before rendering
- Rendering failures surface as recoverable ExportError
- Every step is audited
"""

import re
from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from saa_ledger.audit import AuditLogger, configure_log_level, create_correlation_id
from saa_ledger.config import ExportSettings, get_settings
from saa_ledger.documents import build_template_fields
from saa_ledger.exports import (
    XLSX_MEDIA_TYPE,
    EmptyExportError,
    ExportError,
    build_project_workbook,
    csv_download_bytes,
    encode_payments_csv,
    render_xlsx,
)
from saa_ledger.ledger import refresh_control
from saa_ledger.models.project import MonthlyControl, Payment, Project
from saa_ledger.models.statement import ReconciliationStatement
from saa_ledger.reports import build_statement


CSV_MEDIA_TYPE = "text/csv;charset=utf-8"

NO_PAYMENTS_MESSAGE = "Não há pagamentos neste mês para exportar."
NO_CONTROLS_MESSAGE = "Não há controles mensais para exportar."


class ExportArtifact(BaseModel):
    """A generated file, ready to be offered for download."""
    model_config = ConfigDict(frozen=True)

    filename: str
    media_type: str
    content: bytes


def _file_part(text: str) -> str:
    """Replace every whitespace character with '_' for use in file names."""
    return re.sub(r"\s", "_", text)


class LedgerService:
    """
    Facade used by the UI layer for every core operation.

    Holds no ledger state: every call takes a snapshot and returns a new
    value or artifact.
    """

    def __init__(
        self,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[ExportSettings] = None,
    ):
        app_settings = get_settings().app
        configure_log_level("DEBUG" if app_settings.debug_mode else app_settings.log_level)

        self._audit_logger = audit_logger
        self._settings = settings or get_settings().export

    # -------------------------------------------------------------------------
    # Ledger
    # -------------------------------------------------------------------------

    def refresh(
        self,
        control: MonthlyControl,
        correlation_id: Optional[UUID] = None,
    ) -> MonthlyControl:
        """Re-aggregate a control's derived fields."""
        refreshed = refresh_control(control)

        if self._audit_logger:
            f = refreshed.financials
            self._audit_logger.log_control_aggregated(
                control_id=control.id,
                payment_count=len(control.payments),
                subtotals={
                    "bank_fees": f.bank_fees,
                    "reversals": f.reversals,
                    "financial_application": f.financial_application,
                    "improper_payment": f.improper_payment,
                },
                correlation_id=correlation_id,
            )

        return refreshed

    def statement(
        self,
        project: Project,
        control: MonthlyControl,
        report_date: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ReconciliationStatement:
        """Refresh a control and build its reconciliation statement."""
        control = self.refresh(control, correlation_id)
        statement = build_statement(project, control, report_date)

        if self._audit_logger:
            self._audit_logger.log_statement_built(
                control_id=control.id,
                final_difference=format(statement.totals.final_difference, "f"),
                correlation_id=correlation_id,
            )

        return statement

    # -------------------------------------------------------------------------
    # Exports
    # -------------------------------------------------------------------------

    def export_control_csv(
        self,
        project: Project,
        control: MonthlyControl,
    ) -> ExportArtifact:
        """
        Export one control's payments as a CSV download.

        Raises:
            EmptyExportError: The control has no payments.
            ExportError: Rendering failed.
        """
        correlation_id = create_correlation_id()

        if not control.payments:
            self._skip("control", control.id, NO_PAYMENTS_MESSAGE, correlation_id)

        filename = f"{_file_part(project.title)}_{_file_part(control.name)}.csv"

        try:
            text = encode_payments_csv(control.payments, self._settings.csv_delimiter)
            content = csv_download_bytes(text)
        except Exception as e:
            self._fail("control", control.id, filename, e, correlation_id)

        if self._audit_logger:
            self._audit_logger.log_csv_exported(
                control_id=control.id,
                filename=filename,
                row_count=len(control.payments),
                correlation_id=correlation_id,
            )

        return ExportArtifact(filename=filename, media_type=CSV_MEDIA_TYPE, content=content)

    def export_project_workbook(
        self,
        project: Project,
        report_date: Optional[date] = None,
    ) -> ExportArtifact:
        """
        Export every control of a project into one .xlsx workbook.

        Raises:
            EmptyExportError: The project has no monthly controls.
            ExportError: Rendering failed.
        """
        correlation_id = create_correlation_id()

        if not project.monthly_controls:
            self._skip("project", project.id, NO_CONTROLS_MESSAGE, correlation_id)

        filename = f"{_file_part(project.title)}_completo.xlsx"

        try:
            sheets = build_project_workbook(project, report_date, self._settings)
            content = render_xlsx(sheets)
        except Exception as e:
            self._fail("project", project.id, filename, e, correlation_id)

        if self._audit_logger:
            self._audit_logger.log_workbook_exported(
                project_id=project.id,
                filename=filename,
                sheet_names=[sheet.name for sheet in sheets],
                correlation_id=correlation_id,
            )

        return ExportArtifact(filename=filename, media_type=XLSX_MEDIA_TYPE, content=content)

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def template_fields(
        self,
        project: Project,
        payment: Payment,
        emission_date: Optional[date] = None,
    ) -> dict[str, str]:
        """Flat field mapping for the SAA document template."""
        return build_template_fields(project, payment, emission_date)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _skip(
        self,
        entity_type: str,
        entity_id: str,
        message: str,
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            self._audit_logger.log_export_skipped(
                entity_type=entity_type,
                entity_id=entity_id,
                reason=message,
                correlation_id=correlation_id,
            )
        raise EmptyExportError(message)

    def _fail(
        self,
        entity_type: str,
        entity_id: str,
        artifact: str,
        error: Exception,
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            self._audit_logger.log_export_failed(
                entity_type=entity_type,
                entity_id=entity_id,
                artifact=artifact,
                error_message=str(error),
                correlation_id=correlation_id,
            )
        raise ExportError(f"Falha ao gerar {artifact}: {error}") from error
