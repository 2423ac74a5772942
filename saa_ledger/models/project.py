"""
Core Data Models for SAA Ledger

These models define the schemas for every record the ledger reads:
payments, period financials, monthly controls and projects.

They are designed to:
1. Be immutable snapshots (edits produce new objects via model_copy)
2. Load records from the editing surface unchanged (camelCase aliases)
3. Keep monetary and date fields as the text the user typed

DESIGN DECISION: Amounts and dates stay as text on the models.
The editing surface gives no parsing guarantees, so every reader goes
through the normalizer instead of the model rejecting the record.
"""

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


SNAPSHOT_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    coerce_numbers_to_str=True,
)


def _new_id() -> str:
    return str(uuid4())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ReservedCategory(str, Enum):
    """
    Expense categories whose totals are always derived from payments.

    CRITICAL: Values are matched exactly (case-sensitive, untrimmed)
    against Payment.expense_type.
    """
    BANK_FEES = "Taxas Bancarias"
    REVERSALS = "Estornos"
    FINANCIAL_APPLICATION = "Aplicação Financeira"
    IMPROPER_PAYMENT = "Pagamento indevido"

    @property
    def financial_field(self) -> str:
        """Name of the FinancialData field holding this category's subtotal."""
        return _RESERVED_FIELDS[self]

    @classmethod
    def matches(cls, expense_type: str) -> bool:
        """Check whether a free-text tag is one of the reserved categories."""
        return expense_type in _RESERVED_VALUES


_RESERVED_FIELDS = {
    ReservedCategory.BANK_FEES: "bank_fees",
    ReservedCategory.REVERSALS: "reversals",
    ReservedCategory.FINANCIAL_APPLICATION: "financial_application",
    ReservedCategory.IMPROPER_PAYMENT: "improper_payment",
}

_RESERVED_VALUES = frozenset(category.value for category in ReservedCategory)


# =============================================================================
# PAYMENT
# =============================================================================

class Payment(BaseModel):
    """
    One payable transaction (SAA) within a monthly control.

    All fields are free text. Amounts must be read with
    saa_ledger.ledger.normalize, dates with saa_ledger.ledger.parse_date.
    """
    model_config = SNAPSHOT_CONFIG

    id: str = Field(default_factory=_new_id, description="Unique payment ID")
    saa_number: str = Field(default="", alias="SAA", description="SAA reference number")

    # Dates
    due_date: str = Field(default="", alias="dataVencimento")
    payment_date: str = Field(default="", alias="dataPagamento")

    # Amounts
    amount: str = Field(default="", alias="valor", description="Amount to pay")
    amount_paid: str = Field(default="", alias="valorPago")

    # Classification
    expense_type: str = Field(
        default="",
        alias="tipoDespesa",
        description="Expense category tag (Elemento de Despesa)"
    )
    objective: str = Field(default="", alias="objetivo")
    description: str = Field(default="", alias="descricaoDespesa")
    notes: str = Field(default="", alias="observacoes")
    payment_status: str = Field(default="", alias="statusPagamento")
    approval_status: str = Field(default="", alias="statusSAA")

    # Voucher
    voucher_type: str = Field(default="", alias="tipoComprovante")
    voucher_number: str = Field(default="", alias="numComprovante")

    # Supplier (beneficiary)
    supplier_code: str = Field(default="", alias="codigoFornecedor")
    supplier_name: str = Field(default="", alias="nomeFornecedor")
    supplier_tax_id: str = Field(default="", alias="CNPJ_FORNECEDOR")
    bank_code: str = Field(default="", alias="bancoCodigo")
    branch: str = Field(default="", alias="agencia")
    account: str = Field(default="", alias="contaCorrente")
    pix_key: str = Field(default="", alias="pix")

    @property
    def is_reserved(self) -> bool:
        """True when the expense tag is one of the reserved categories."""
        return ReservedCategory.matches(self.expense_type)


# =============================================================================
# PERIOD FINANCIALS
# =============================================================================

class FinancialData(BaseModel):
    """
    Period-level financial inputs and derived fields of one monthly control.

    CRITICAL: bank_fees, reversals, financial_application and
    improper_payment are derived. The aggregator overwrites them on
    every pass; values typed by a user never survive.
    """
    model_config = SNAPSHOT_CONFIG

    # Period bounds (auto-filled from payment due dates when empty)
    period_start: str = Field(default="", alias="periodoDe")
    period_end: str = Field(default="", alias="periodoAte")

    # Approved amounts
    total_approved: str = Field(default="", alias="totalAprovado")
    installment_received: str = Field(default="", alias="parcelaRecebida")
    prior_balance: str = Field(default="", alias="saldoParcelaAnterior")

    # Revenues
    investment_yield: str = Field(default="", alias="rendimentosAplicacao")
    donation: str = Field(default="", alias="doacao")
    inter_account_loans: str = Field(default="", alias="emprestimos")
    credit_refund: str = Field(default="", alias="devolucaoCredito")
    network_donation: str = Field(default="", alias="doacaoRede")
    redemptions: str = Field(default="", alias="resgates")

    # Derived expense subtotals (read-only)
    bank_fees: str = Field(default="", alias="taxasBancarias")
    reversals: str = Field(default="", alias="estornos")
    financial_application: str = Field(default="", alias="aplicacaoFinanceira")
    improper_payment: str = Field(default="", alias="pagamentoIndevido")

    # Closing balances
    bank_statement_balance: str = Field(default="", alias="saldoBancario")
    investment_statement_balance: str = Field(default="", alias="saldoAplicacao")
    statement_date: str = Field(default="", alias="dataExtrato")

    def subtotal(self, category: ReservedCategory) -> str:
        """Stored subtotal text for a reserved category."""
        return getattr(self, category.financial_field)


# =============================================================================
# CONTAINERS
# =============================================================================

class MonthlyControl(BaseModel):
    """One accounting period: its payments (insertion order) and financials."""
    model_config = SNAPSHOT_CONFIG

    id: str = Field(default_factory=_new_id)
    name: str = Field(default="", description="Display name, e.g. 'Janeiro 2024'")
    payments: tuple[Payment, ...] = Field(default_factory=tuple)
    financials: FinancialData = Field(default_factory=FinancialData)


class Project(BaseModel):
    """
    A funded project.

    Only the header fields used by reports are modelled here.
    """
    model_config = SNAPSHOT_CONFIG

    id: str = Field(default_factory=_new_id)
    title: str = Field(default="", alias="tituloProjeto")
    organization: str = Field(default="", alias="organizacao")
    financial_officer: str = Field(default="", alias="responsavelFinanceiro")
    bank_name: str = Field(default="", alias="bancoPROJ")
    bank_branch: str = Field(default="", alias="agenciaPROJ")
    bank_account: str = Field(default="", alias="contaCorrentePROJ")
    monthly_controls: tuple[MonthlyControl, ...] = Field(
        default_factory=tuple,
        alias="monthlyControls"
    )
