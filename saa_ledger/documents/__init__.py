"""Document field projection package."""

from saa_ledger.documents.fields import TEMPLATE_KEYS, build_template_fields

__all__ = ["TEMPLATE_KEYS", "build_template_fields"]
