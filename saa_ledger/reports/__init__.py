"""Reports package."""

from saa_ledger.reports.statement import build_statement, compute_totals

__all__ = ["build_statement", "compute_totals"]
