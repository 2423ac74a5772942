"""
Delimited Text Export

Renders a control's payment list as a 16-column CSV table:
- dates as dd/mm/yyyy
- money with two decimals and a comma separator ("100,50")
- a cell containing the delimiter, a quote or a line break is quoted,
  with inner quotes doubled; every other cell is emitted verbatim
- rows joined with "\n", no trailing newline

The download form is UTF-8 with a byte-order mark so spreadsheet tools
detect the encoding.
"""

import csv
import io
from typing import Iterable, Optional

from saa_ledger.ledger.formatting import format_br_date, format_decimal_comma
from saa_ledger.models.project import Payment


PAYMENT_HEADERS = (
    "Código Fornecedor",
    "Data de Vencimento",
    "Nome do Fornecedor (Beneficiário)",
    "CNPJ Fornecedor (Beneficiário)",
    "Valor à Pagar (R$)",
    "Tipo de Comprovante",
    "Nº do Comprovante",
    "Objetivo",
    "Elemento de Despesa",
    "Descrição da Despesa",
    "Data do Pagto",
    "Valor Pago (R$)",
    "Observações",
    "Status do Pagamento",
    "Status do SAA",
    "Nº do SAA",
)

# Positions of the monetary columns in PAYMENT_HEADERS
AMOUNT_COLUMN = 4
AMOUNT_PAID_COLUMN = 11

UTF8_BOM = "\ufeff"


def payment_to_row(payment: Payment) -> list[str]:
    """Display values of one payment, in PAYMENT_HEADERS order."""
    return [
        payment.supplier_code,
        format_br_date(payment.due_date),
        payment.supplier_name,
        payment.supplier_tax_id,
        format_decimal_comma(payment.amount),
        payment.voucher_type,
        payment.voucher_number,
        payment.objective,
        payment.expense_type,
        payment.description,
        format_br_date(payment.payment_date),
        format_decimal_comma(payment.amount_paid),
        payment.notes,
        payment.payment_status,
        payment.approval_status,
        payment.saa_number,
    ]


def escape_cell(value: Optional[str], delimiter: str = ",") -> str:
    """Quote a cell only when it holds the delimiter, a quote or a line break."""
    text = value or ""
    if delimiter in text or '"' in text or "\n" in text or "\r" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def encode_rows(rows: Iterable[Iterable[str]], delimiter: str = ",") -> str:
    return "\n".join(
        delimiter.join(escape_cell(cell, delimiter) for cell in row)
        for row in rows
    )


def encode_payments_csv(payments: Iterable[Payment], delimiter: str = ",") -> str:
    """
    Encode payments as CSV text (header row first).

    An empty payment list yields the header row alone.
    """
    rows = [list(PAYMENT_HEADERS)]
    rows.extend(payment_to_row(p) for p in payments)
    return encode_rows(rows, delimiter)


def decode_csv_table(text: str, delimiter: str = ",") -> list[list[str]]:
    """
    Parse a table produced by encode_payments_csv back into cells.

    A leading byte-order mark is ignored.
    """
    if text.startswith(UTF8_BOM):
        text = text[len(UTF8_BOM):]
    if not text:
        return []
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    return [row for row in reader]


def csv_download_bytes(text: str) -> bytes:
    """UTF-8 bytes of a CSV table, prefixed with the byte-order mark."""
    return (UTF8_BOM + text).encode("utf-8")
