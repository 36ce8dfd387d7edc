"""Unit tests for op_finance domain models, insights and schemas."""

from datetime import date

import pytest
from pydantic import ValidationError

from src.op_common.enums import CashFlowHealth, GrowthTrend
from src.op_finance.application.schemas import BulkUpdateFields, FinancialMetricsQuery
from src.op_finance.domain.insights import generate_insights
from tests.factories import make_account, make_metrics, make_transaction


class TestTransaction:
    def test_pending_past_due_is_overdue(self) -> None:
        assert make_transaction().is_overdue(today=date(2025, 3, 21)) is True

    def test_due_today_is_not_overdue(self) -> None:
        assert make_transaction().is_overdue(today=date(2025, 3, 20)) is False

    def test_paid_is_never_overdue(self) -> None:
        tx = make_transaction(status="recebido")
        assert tx.is_overdue(today=date(2026, 1, 1)) is False

    def test_without_due_date_is_never_overdue(self) -> None:
        assert make_transaction(due_date=None).is_overdue(today=date(2030, 1, 1)) is False

    def test_mark_as_paid_revenue(self) -> None:
        tx = make_transaction()
        paid = tx.mark_as_paid(date(2025, 3, 15))
        assert paid.status == "recebido"
        assert paid.payment_date == date(2025, 3, 15)
        assert paid.is_paid()
        assert tx.status == "pendente"

    def test_mark_as_paid_expense(self) -> None:
        paid = make_transaction(type="despesa").mark_as_paid()
        assert paid.status == "pago"
        assert paid.payment_date is not None

    def test_is_immutable(self) -> None:
        with pytest.raises(AttributeError):
            make_transaction().status = "pago"  # type: ignore[misc]


def test_account_can_debit() -> None:
    account = make_account(balance=100.0)
    assert account.can_debit(100.0)
    assert not account.can_debit(100.01)


class TestFinancialMetrics:
    def test_totals_and_profit(self) -> None:
        m = make_metrics()
        assert m.total_receitas == 1000.0
        assert m.total_despesas == 500.0
        assert m.net_profit == 400.0
        assert m.receitas_pending_percentage == 20.0
        assert m.despesas_pending_percentage == 20.0

    def test_pending_percentage_without_totals(self) -> None:
        m = make_metrics(receitas_em_aberto=0.0, receitas_realizadas=0.0)
        assert m.receitas_pending_percentage == 0.0

    @pytest.mark.parametrize(
        ("cash_flow", "expected"),
        [
            (300.0, CashFlowHealth.HEALTHY),
            (100.0, CashFlowHealth.WARNING),
            (50.0, CashFlowHealth.CRITICAL),
        ],
    )
    def test_cash_flow_health(self, cash_flow: float, expected: CashFlowHealth) -> None:
        assert make_metrics(monthly_cash_flow=cash_flow).cash_flow_health() is expected

    @pytest.mark.parametrize(
        ("growth", "expected"),
        [(6.0, GrowthTrend.UP), (-6.0, GrowthTrend.DOWN), (5.0, GrowthTrend.STABLE)],
    )
    def test_growth_trend(self, growth: float, expected: GrowthTrend) -> None:
        assert make_metrics(quarterly_growth=growth).growth_trend() is expected


class TestInsights:
    def test_stable_position(self) -> None:
        insights = generate_insights(make_metrics())
        assert insights.cash_flow_health == "healthy"
        assert insights.growth_trend == "stable"
        assert insights.recommendations == ["Stable financial position. Keep monitoring."]

    def test_warnings_accumulate(self) -> None:
        insights = generate_insights(
            make_metrics(
                monthly_cash_flow=-100.0,
                receitas_em_aberto=900.0,
                receitas_realizadas=100.0,
                despesas_realizadas=400.0,
                quarterly_growth=-20.0,
            )
        )
        assert insights.net_profit == -300.0
        assert len(insights.recommendations) == 4
        assert insights.recommendations[0].startswith("Critical cash flow")


class TestSchemas:
    def test_settling_statuses(self) -> None:
        assert BulkUpdateFields(status="pago").settles()
        assert BulkUpdateFields(status="recebido").settles()
        assert not BulkUpdateFields(status="cancelado").settles()
        assert not BulkUpdateFields(category="Other").settles()

    def test_unknown_bulk_status_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BulkUpdateFields(status="pendente")

    def test_metrics_range_needs_both_ends(self) -> None:
        with pytest.raises(ValidationError):
            FinancialMetricsQuery(start_date=date(2025, 1, 1))

    def test_metrics_range_must_be_ordered(self) -> None:
        with pytest.raises(ValidationError):
            FinancialMetricsQuery(start_date=date(2025, 2, 1), end_date=date(2025, 1, 1))
