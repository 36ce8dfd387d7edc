"""Domain object builders shared by unit tests."""

from dataclasses import replace
from datetime import date

from src.op_finance.domain.models import Account, FinancialMetrics, Transaction
from src.op_project.domain.models import ProjectSummary
from src.op_team.domain.models import TeamMember


def make_member(**overrides) -> TeamMember:
    base = TeamMember(
        id="member-1",
        full_name="Ana Souza",
        email="ana@opone.com",
        primary_specialization="Backend",
        seniority_level="Senior",
        profile_photo_url=None,
        first_login=False,
    )
    return replace(base, **overrides)


def make_project(**overrides) -> ProjectSummary:
    base = ProjectSummary(
        id="p-1",
        name="Portal",
        description=None,
        project_type="Web",
        status="Planejamento",
        health="Saudável",
        progress_percentage=80,
        total_budget=1000.0,
        used_budget=500.0,
        start_date=date(2025, 1, 1),
        estimated_end_date=date(2025, 12, 31),
        risk_level="Baixo",
        next_milestone=None,
        client_id=None,
        client_name=None,
        manager_id=None,
        manager_name=None,
    )
    return replace(base, **overrides)


def make_transaction(**overrides) -> Transaction:
    base = Transaction(
        id="tx-1",
        description="Consulting fee",
        amount=100.0,
        type="receita",
        category="Services",
        status="pendente",
        account_id="acc-1",
        transaction_date=date(2025, 3, 10),
        due_date=date(2025, 3, 20),
    )
    return replace(base, **overrides)


def make_account(**overrides) -> Account:
    base = Account(id="acc-1", name="Main", type="corrente", balance=500.0, is_active=True)
    return replace(base, **overrides)


def make_metrics(**overrides) -> FinancialMetrics:
    base = FinancialMetrics(
        receitas_em_aberto=200.0,
        receitas_realizadas=800.0,
        despesas_em_aberto=100.0,
        despesas_realizadas=400.0,
        accounts_balance=1500.0,
        monthly_cash_flow=300.0,
        quarterly_growth=0.0,
        period_start=date(2025, 1, 1),
        period_end=date(2025, 12, 31),
    )
    return replace(base, **overrides)
