"""
Reconciliation Statement Builder ("Prestação de Contas")

Builds the itemized revenue/expense/balance statement of one monthly
control. The control's financials must already be aggregated: the four
reserved-category subtotals are read from FinancialData, not recomputed.

Arithmetic:
    available_to_spend        = prior_balance + installment_received
    total_expenses            = sum of ALL payment amounts
    computed_closing_balance  = available_to_spend - total_expenses
    total_revenue             = prior_balance + investment_yield + donation
                                + inter_account_loans + credit_refund
                                + network_donation + redemptions
    project_balance           = total_revenue - total_expenses
    final_difference          = bank_statement_balance
                                + investment_statement_balance
                                - project_balance

DESIGN DECISION: total_expenses is NOT the sum of the listed expense
lines. Reserved categories are listed only as subtotals (so they are not
counted twice in the listing), while the total reconciles against the
full payment set.
"""

from datetime import date
from typing import Optional

from saa_ledger.ledger.formatting import format_br_date
from saa_ledger.ledger.normalizer import ZERO, normalize
from saa_ledger.models.project import MonthlyControl, Project, ReservedCategory
from saa_ledger.models.statement import (
    ReconciliationStatement,
    RowKind,
    StatementRow,
    StatementTotals,
)


REPORT_TITLE = "RELATÓRIO FINANCEIRO - Prestação de Contas"
AMOUNT_CAPTION = "Valor (R$)"

SPECIAL_LABELS = {
    ReservedCategory.BANK_FEES: "Taxas Bancárias",
    ReservedCategory.REVERSALS: "Estornos",
    ReservedCategory.FINANCIAL_APPLICATION: "Aplicação Financeira",
    ReservedCategory.IMPROPER_PAYMENT: "Pagamento indevido",
}


def _row(kind: RowKind, *cells) -> StatementRow:
    return StatementRow(kind=kind, cells=cells)


def _blank() -> StatementRow:
    return StatementRow(kind=RowKind.BLANK)


def compute_totals(control: MonthlyControl) -> StatementTotals:
    """Compute every figure of the statement for a control."""
    f = control.financials

    prior_balance = normalize(f.prior_balance)
    installment_received = normalize(f.installment_received)

    total_expenses = sum((normalize(p.amount) for p in control.payments), ZERO)
    available_to_spend = prior_balance + installment_received

    total_revenue = (
        prior_balance
        + normalize(f.investment_yield)
        + normalize(f.donation)
        + normalize(f.inter_account_loans)
        + normalize(f.credit_refund)
        + normalize(f.network_donation)
        + normalize(f.redemptions)
    )

    project_balance = total_revenue - total_expenses
    bank_statement_balance = normalize(f.bank_statement_balance)
    investment_statement_balance = normalize(f.investment_statement_balance)

    return StatementTotals(
        total_approved=normalize(f.total_approved),
        installment_received=installment_received,
        prior_balance=prior_balance,
        available_to_spend=available_to_spend,
        total_expenses=total_expenses,
        computed_closing_balance=available_to_spend - total_expenses,
        total_revenue=total_revenue,
        special_subtotals={
            category: normalize(f.subtotal(category)) for category in ReservedCategory
        },
        project_balance=project_balance,
        bank_statement_balance=bank_statement_balance,
        investment_statement_balance=investment_statement_balance,
        final_difference=(
            bank_statement_balance + investment_statement_balance - project_balance
        ),
    )


def build_statement(
    project: Project,
    control: MonthlyControl,
    report_date: Optional[date] = None,
) -> ReconciliationStatement:
    """
    Build the reconciliation statement of one control.

    Args:
        project: Supplies the header fields (title, organization, bank).
        control: An aggregated control (see refresh_control).
        report_date: Delivery date printed in the header. Defaults to today.
    """
    report_date = report_date or date.today()
    f = control.financials
    totals = compute_totals(control)
    ordinary = tuple(p for p in control.payments if not p.is_reserved)
    statement_date = format_br_date(f.statement_date)

    rows: list[StatementRow] = [
        _row(RowKind.TITLE, REPORT_TITLE),

        # Project header
        _row(RowKind.HEADER, "Título do Projeto:", project.title),
        _row(
            RowKind.HEADER,
            "Organização:", project.organization, None,
            "Responsável financeiro:", project.financial_officer,
        ),
        _row(
            RowKind.HEADER,
            "Data de entrega:", format_br_date(report_date), None,
            "Banco:", project.bank_name,
            f"Agência: {project.bank_branch}",
            f"Conta Corrente: {project.bank_account}",
        ),
        _row(
            RowKind.HEADER,
            "Período relatado:",
            f"De: {format_br_date(f.period_start)}",
            f"Até: {format_br_date(f.period_end)}",
        ),
        _blank(),

        # Summary
        _row(RowKind.VALUE, "TOTAL APROVADO", totals.total_approved),
        _row(RowKind.VALUE, "PARCELA RECEBIDA em R$", totals.installment_received),
        _row(RowKind.VALUE, "SALDO DA PARCELA ANTERIOR", totals.prior_balance),
        _row(RowKind.VALUE, "DISPONÍVEL PARA GASTO", totals.available_to_spend),
        _row(RowKind.VALUE, "TOTAL DE GASTOS", totals.total_expenses),
        _row(RowKind.VALUE, "SALDO FINAL", totals.computed_closing_balance),
        _blank(),

        # 1. Revenues
        _row(RowKind.SECTION, "1. Receitas", AMOUNT_CAPTION),
        _row(RowKind.VALUE, "Saldo Anterior", totals.prior_balance),
        _row(
            RowKind.VALUE,
            "Rendimentos Líquidos de Aplicação Financeira",
            normalize(f.investment_yield),
        ),
        _row(RowKind.VALUE, "Doação", normalize(f.donation)),
        _row(RowKind.VALUE, "Empréstimos entre contas", normalize(f.inter_account_loans)),
        _row(RowKind.VALUE, "Devolução de crédito indevido", normalize(f.credit_refund)),
        _row(RowKind.VALUE, "Doação Rede Cerrado", normalize(f.network_donation)),
        _row(RowKind.VALUE, "Resgates", normalize(f.redemptions)),
        _blank(),
        _row(RowKind.VALUE, "Total das Receitas", totals.total_revenue),
        _blank(),

        # 2. Expenses
        _row(RowKind.SECTION, "2. Despesas", AMOUNT_CAPTION),
        _row(
            RowKind.COLUMNS,
            "Elemento de Despesa", "Descrição da Despesa", AMOUNT_CAPTION,
        ),
    ]

    rows.extend(
        _row(RowKind.ITEM, p.expense_type, p.description, normalize(p.amount))
        for p in ordinary
    )
    rows.append(_blank())
    rows.extend(
        _row(RowKind.VALUE, SPECIAL_LABELS[category], totals.special_subtotals[category])
        for category in ReservedCategory
    )
    rows.extend([
        _blank(),
        _row(RowKind.VALUE, "Total das Despesas", totals.total_expenses),
        _blank(),

        # Closing
        _row(RowKind.CLOSING, "3. Saldo do Projeto ( 1 - 2 )", totals.project_balance),
        _row(
            RowKind.CLOSING,
            f"4. Saldo Bancário (Conforme Extrato Bancário): Em {statement_date}",
            totals.bank_statement_balance,
        ),
        _row(
            RowKind.CLOSING,
            "5. Saldo de Aplicação Financeira (Conforme Extrato Bancário): "
            f"Em {statement_date}",
            totals.investment_statement_balance,
        ),
        _row(
            RowKind.CLOSING,
            "6. Saldo Final = Diferença ( = 4 (+) 5 (-) 3 )",
            totals.final_difference,
        ),
    ])

    return ReconciliationStatement(
        project_title=project.title,
        control_name=control.name,
        report_date=report_date,
        totals=totals,
        ordinary_payments=ordinary,
        rows=tuple(rows),
    )
