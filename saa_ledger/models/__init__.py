"""
Data Models Package

This package contains all Pydantic models used in SAA Ledger.
Every record entering or leaving the core conforms to these schemas.
"""

from saa_ledger.models.project import (
    FinancialData,
    MonthlyControl,
    Payment,
    Project,
    ReservedCategory,
)
from saa_ledger.models.statement import (
    ReconciliationStatement,
    RowKind,
    StatementCell,
    StatementRow,
    StatementTotals,
)
from saa_ledger.models.grid import (
    CellType,
    GridCell,
    MergeRange,
    SheetGrid,
)
from saa_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "FinancialData",
    "MonthlyControl",
    "Payment",
    "Project",
    "ReservedCategory",
    # Statement models
    "ReconciliationStatement",
    "RowKind",
    "StatementCell",
    "StatementRow",
    "StatementTotals",
    # Grid models
    "CellType",
    "GridCell",
    "MergeRange",
    "SheetGrid",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
