"""
Audit Models for SAA Ledger

Every aggregation and export is logged for audit purposes.
This provides:
1. Traceability of which snapshot produced which artifact
2. Debugging information when an export fails
3. Accountability for the reports handed to funders

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger
    CONTROL_AGGREGATED = "control_aggregated"

    # Reports
    STATEMENT_BUILT = "statement_built"

    # Exports
    CSV_EXPORTED = "csv_exported"
    WORKBOOK_EXPORTED = "workbook_exported"
    EXPORT_SKIPPED_EMPTY = "export_skipped_empty"
    EXPORT_FAILED = "export_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'control', 'project')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all sheets of one workbook)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.csv_exported(control_id, filename, rows, correlation_id)
    """

    @staticmethod
    def control_aggregated(
        control_id: str,
        payment_count: int,
        subtotals: dict[str, str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONTROL_AGGREGATED,
            severity=AuditSeverity.DEBUG,
            entity_type="control",
            entity_id=control_id,
            correlation_id=correlation_id,
            description=f"Derived fields refreshed from {payment_count} payments",
            details={
                "payment_count": payment_count,
                "subtotals": subtotals,
            },
        )

    @staticmethod
    def statement_built(
        control_id: str,
        final_difference: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATEMENT_BUILT,
            entity_type="control",
            entity_id=control_id,
            correlation_id=correlation_id,
            description=f"Reconciliation statement built (difference {final_difference})",
            details={
                "final_difference": final_difference,
            },
        )

    @staticmethod
    def csv_exported(
        control_id: str,
        filename: str,
        row_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CSV_EXPORTED,
            entity_type="control",
            entity_id=control_id,
            correlation_id=correlation_id,
            description=f"CSV exported: {filename}",
            details={
                "filename": filename,
                "row_count": row_count,
            },
        )

    @staticmethod
    def workbook_exported(
        project_id: str,
        filename: str,
        sheet_names: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WORKBOOK_EXPORTED,
            entity_type="project",
            entity_id=project_id,
            correlation_id=correlation_id,
            description=f"Workbook exported: {filename} ({len(sheet_names)} sheets)",
            details={
                "filename": filename,
                "sheet_names": sheet_names,
            },
        )

    @staticmethod
    def export_skipped_empty(
        entity_type: str,
        entity_id: str,
        reason: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_SKIPPED_EMPTY,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Export skipped: {reason}",
            details={
                "reason": reason,
            },
        )

    @staticmethod
    def export_failed(
        entity_type: str,
        entity_id: str,
        artifact: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Export failed: {artifact}",
            error_message=error_message,
            details={
                "artifact": artifact,
            },
        )
