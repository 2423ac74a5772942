"""Shared fixtures for SAA Ledger tests."""

from datetime import date

import pytest

from saa_ledger.config import get_settings
from saa_ledger.models.project import FinancialData, MonthlyControl, Payment, Project


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings for every test so env overrides do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def report_date() -> date:
    return date(2024, 2, 5)


@pytest.fixture
def payments() -> tuple[Payment, ...]:
    return (
        Payment(
            id="p1",
            saa_number="001",
            due_date="2024-01-10",
            payment_date="2024-01-11",
            amount="50",
            amount_paid="50",
            expense_type="Material de consumo",
            description="Sementes nativas",
            supplier_code="F01",
            supplier_name="Viveiro Cerrado Vivo",
            supplier_tax_id="12.345.678/0001-90",
        ),
        Payment(
            id="p2",
            saa_number="002",
            due_date="2024-01-25",
            amount="30",
            expense_type="Taxas Bancarias",
            description="Tarifa de manutenção",
        ),
    )


@pytest.fixture
def control(payments) -> MonthlyControl:
    return MonthlyControl(
        id="c1",
        name="Janeiro 2024",
        payments=payments,
        financials=FinancialData(
            total_approved="10000",
            installment_received="1000",
            prior_balance="200",
            investment_yield="10",
            bank_statement_balance="500",
            investment_statement_balance="100",
            statement_date="2024-01-31",
        ),
    )


@pytest.fixture
def project(control) -> Project:
    return Project(
        id="proj1",
        title="Projeto Verde",
        organization="Associação Raízes",
        financial_officer="Ana Souza",
        bank_name="Banco do Brasil",
        bank_branch="1234-5",
        bank_account="67890-1",
        monthly_controls=(control,),
    )
