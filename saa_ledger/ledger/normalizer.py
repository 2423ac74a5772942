"""
Numeric and Date Normalization

DESIGN DECISION: Both functions are total. Records come from a free-text
editing surface, so anything unparseable becomes zero (amounts) or None
(dates). Nothing in the ledger raises on malformed input.
"""

import sys
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union


ZERO = Decimal("0")

# Largest magnitude a double holds; anything beyond overflows to infinity
MAX_MAGNITUDE = Decimal(sys.float_info.max)

NumericInput = Union[str, int, float, Decimal, None]
DateInput = Union[str, date, datetime, None]


def normalize(value: NumericInput) -> Decimal:
    """
    Coerce a monetary or numeric field to Decimal.

    Returns Decimal("0") for empty text, unparseable text (including
    underscore digit separators), NaN/Infinity, magnitudes beyond the
    double range and unsupported types.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value)) if value == value else ZERO
    elif isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not result.is_finite() or result.copy_abs() > MAX_MAGNITUDE:
        return ZERO
    return result


def parse_date(value: DateInput) -> Optional[date]:
    """
    Coerce a date field to a calendar date.

    Accepts date/datetime objects, 'YYYY-MM-DD' and ISO datetimes (time
    and offset are dropped). Returns None when the value is empty or
    unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None
