"""Recommendations derived from a FinancialMetrics snapshot."""

from dataclasses import dataclass

from src.op_common.enums import CashFlowHealth, GrowthTrend
from src.op_finance.domain.models import FinancialMetrics


@dataclass
class FinancialInsights:
    cash_flow_health: str
    growth_trend: str
    pending_receitas_percentage: float
    pending_despesas_percentage: float
    net_profit: float
    recommendations: list[str]


def generate_insights(metrics: FinancialMetrics) -> FinancialInsights:
    health = metrics.cash_flow_health()
    trend = metrics.growth_trend()
    pending_receitas = metrics.receitas_pending_percentage
    net_profit = metrics.net_profit

    recommendations: list[str] = []
    if health is CashFlowHealth.CRITICAL:
        recommendations.append("Critical cash flow. Review expenses urgently.")
    if pending_receitas > 50:
        recommendations.append("High share of pending revenue. Step up collections.")
    if net_profit < 0:
        recommendations.append("Negative profit. Analyse the largest expense categories.")
    if trend is GrowthTrend.DOWN:
        recommendations.append("Downward trend. Review the commercial strategy.")
    if not recommendations:
        recommendations.append("Stable financial position. Keep monitoring.")

    return FinancialInsights(
        cash_flow_health=health.value,
        growth_trend=trend.value,
        pending_receitas_percentage=pending_receitas,
        pending_despesas_percentage=metrics.despesas_pending_percentage,
        net_profit=net_profit,
        recommendations=recommendations,
    )
