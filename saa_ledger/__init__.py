"""
SAA Ledger - Source Package

Payment ledger and accountability reporting ("Prestação de Contas") for
project-funded monthly controls.

DESIGN PRINCIPLES:
1. Records are immutable snapshots; every edit returns a new snapshot
2. Derived fields are recomputed, never trusted
3. Malformed input degrades to zero/blank, never to an exception
4. Exports are pure transforms of a snapshot
5. Every export is auditable
"""

__version__ = "1.0.0"
__author__ = "SAA Ledger Team"
