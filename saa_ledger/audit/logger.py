"""
Audit Logger

DESIGN DECISION: Every aggregation and export is logged.
This provides:
1. Traceability of which snapshot produced which artifact
2. Debugging capability when an export fails
3. A history of the reports handed to funders

The audit logger:
- Is synchronous, like the rest of the core
- Gracefully handles failures (a logging error never breaks an export)
- Supports correlation IDs to trace related events
"""

import logging
from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from saa_ledger.config import get_settings
from saa_ledger.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_log_level(level: str) -> None:
    """Set the minimum level of every saa_ledger logger."""
    logging.getLogger("saa_ledger").setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events to the structured local log and keeps the events of the
    current session in memory for display.
    """

    def __init__(self, history_size: Optional[int] = None):
        """
        Initialize audit logger.

        Args:
            history_size: Most recent events kept in self.history.
                Defaults to the audit_history_size setting; 0 keeps none.
        """
        if history_size is None:
            history_size = get_settings().app.audit_history_size
        self._logger = structlog.get_logger("saa_ledger.audit")
        self.history: deque[AuditEvent] = deque(maxlen=history_size)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written, False if logging failed.
        """
        self.history.append(event)

        try:
            log_dict = event.to_log_dict()
            severity = event.severity.value

            if severity in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif severity == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif severity == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

        return True

    def log_control_aggregated(
        self,
        control_id: str,
        payment_count: int,
        subtotals: dict[str, str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a refresh of derived fields."""
        self.log(AuditEventBuilder.control_aggregated(
            control_id=control_id,
            payment_count=payment_count,
            subtotals=subtotals,
            correlation_id=correlation_id,
        ))

    def log_statement_built(
        self,
        control_id: str,
        final_difference: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a reconciliation statement build."""
        self.log(AuditEventBuilder.statement_built(
            control_id=control_id,
            final_difference=final_difference,
            correlation_id=correlation_id,
        ))

    def log_csv_exported(
        self,
        control_id: str,
        filename: str,
        row_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a CSV export."""
        self.log(AuditEventBuilder.csv_exported(
            control_id=control_id,
            filename=filename,
            row_count=row_count,
            correlation_id=correlation_id,
        ))

    def log_workbook_exported(
        self,
        project_id: str,
        filename: str,
        sheet_names: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a workbook export."""
        self.log(AuditEventBuilder.workbook_exported(
            project_id=project_id,
            filename=filename,
            sheet_names=sheet_names,
            correlation_id=correlation_id,
        ))

    def log_export_skipped(
        self,
        entity_type: str,
        entity_id: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an export refused because there was nothing to export."""
        self.log(AuditEventBuilder.export_skipped_empty(
            entity_type=entity_type,
            entity_id=entity_id,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_export_failed(
        self,
        entity_type: str,
        entity_id: str,
        artifact: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed export."""
        self.log(AuditEventBuilder.export_failed(
            entity_type=entity_type,
            entity_id=entity_id,
            artifact=artifact,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user request (e.g., one workbook export).
    """
    return uuid4()
