"""
Template Field Projection

Builds the flat key -> string mapping consumed by the document-templating
collaborator (SAA request documents).

DESIGN DECISION: The mapping is an explicit, closed list of keys. Keys
are the placeholder names already used in the existing document
templates, so they keep their original spelling.
"""

from datetime import date
from typing import Optional

from saa_ledger.ledger.formatting import format_br_date, format_brl
from saa_ledger.models.project import Payment, Project


PROJECT_KEYS = (
    "tituloProjeto",
    "organizacao",
    "responsavelFinanceiro",
    "bancoPROJ",
    "agenciaPROJ",
    "contaCorrentePROJ",
)

PAYMENT_KEYS = (
    "SAA",
    "dataVencimento",
    "tipoDespesa",
    "tipoComprovante",
    "numComprovante",
    "valor",
    "codigoFornecedor",
    "nomeFornecedor",
    "CNPJ_FORNECEDOR",
    "bancoCodigo",
    "agencia",
    "contaCorrente",
    "pix",
    "objetivo",
    "descricaoDespesa",
    "dataPagamento",
    "valorPago",
    "observacoes",
    "statusPagamento",
    "statusSAA",
)

DERIVED_KEYS = (
    "dataEmissaoBR",
    "dataVencimentoBR",
    "valorBR",
    "dataPagamentoBR",
    "valorPagoBR",
)

TEMPLATE_KEYS = PROJECT_KEYS + PAYMENT_KEYS + DERIVED_KEYS


def build_template_fields(
    project: Project,
    payment: Payment,
    emission_date: Optional[date] = None,
) -> dict[str, str]:
    """
    Flat template mapping for one payment of a project.

    Args:
        project: Project header fields.
        payment: The payment the document is issued for.
        emission_date: Issue date of the document. Defaults to today.

    Returns:
        A dict with exactly the keys in TEMPLATE_KEYS.
    """
    emission_date = emission_date or date.today()

    return {
        # Project
        "tituloProjeto": project.title,
        "organizacao": project.organization,
        "responsavelFinanceiro": project.financial_officer,
        "bancoPROJ": project.bank_name,
        "agenciaPROJ": project.bank_branch,
        "contaCorrentePROJ": project.bank_account,
        # Payment
        "SAA": payment.saa_number,
        "dataVencimento": payment.due_date,
        "tipoDespesa": payment.expense_type,
        "tipoComprovante": payment.voucher_type,
        "numComprovante": payment.voucher_number,
        "valor": payment.amount,
        "codigoFornecedor": payment.supplier_code,
        "nomeFornecedor": payment.supplier_name,
        "CNPJ_FORNECEDOR": payment.supplier_tax_id,
        "bancoCodigo": payment.bank_code,
        "agencia": payment.branch,
        "contaCorrente": payment.account,
        "pix": payment.pix_key,
        "objetivo": payment.objective,
        "descricaoDespesa": payment.description,
        "dataPagamento": payment.payment_date,
        "valorPago": payment.amount_paid,
        "observacoes": payment.notes,
        "statusPagamento": payment.payment_status,
        "statusSAA": payment.approval_status,
        # Derived display values
        "dataEmissaoBR": format_br_date(emission_date),
        "dataVencimentoBR": format_br_date(payment.due_date),
        "valorBR": format_brl(payment.amount),
        "dataPagamentoBR": format_br_date(payment.payment_date),
        "valorPagoBR": format_brl(payment.amount_paid),
    }
