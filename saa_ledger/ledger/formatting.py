"""
Brazilian display formatting for dates and money.

Used by the CSV encoder, the statement builder and the template field
projection. Inputs go through the normalizer first, so formatting never
raises.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext

from saa_ledger.ledger.normalizer import DateInput, NumericInput, normalize, parse_date


CENTS = Decimal("0.01")


def to_money(value: NumericInput) -> Decimal:
    """Normalize and round to cents, keeping every integer digit."""
    amount = normalize(value)
    with localcontext() as ctx:
        # integer digits plus two decimals must fit the working precision
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_br_date(value: DateInput) -> str:
    """dd/mm/yyyy, or '' when the date is missing or unparseable."""
    parsed = parse_date(value)
    return parsed.strftime("%d/%m/%Y") if parsed else ""


def format_decimal_comma(value: NumericInput) -> str:
    """Two decimals with a comma separator and no grouping: '1234,50'."""
    return format(to_money(value), "f").replace(".", ",")


def format_brl(value: NumericInput) -> str:
    """Currency text as 'R$ 1.234,56' (negative: '-R$ 1.234,56')."""
    amount = to_money(value)
    sign = "-" if amount < 0 else ""
    grouped = f"{amount.copy_abs():,.2f}"
    # swap US separators for Brazilian ones
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {localized}"
