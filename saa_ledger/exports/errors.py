"""
Export Errors

Every export failure is recoverable: the calling layer shows the message
to the user and the application keeps running.
"""


class ExportError(Exception):
    """Base error for artifact generation. The message is user-facing."""
    pass


class EmptyExportError(ExportError):
    """Nothing to export (no payments in the control, or no controls)."""
    pass
