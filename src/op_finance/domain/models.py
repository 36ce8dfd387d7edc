"""Domain models for op_finance.

Transaction is immutable; state changes return a new instance.
"""

from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime
from typing import Any

from src.op_common.datetime_utils import utc_now
from src.op_common.enums import (
    CashFlowHealth,
    GrowthTrend,
    TransactionStatus,
    TransactionType,
)

_PAID_STATUSES = frozenset({TransactionStatus.RECEBIDO.value, TransactionStatus.PAGO.value})


@dataclass(frozen=True)
class Transaction:
    id: str
    description: str
    amount: float
    type: str
    category: str
    status: str
    account_id: str
    transaction_date: date
    due_date: date | None = None
    payment_date: date | None = None
    client_id: str | None = None
    supplier_id: str | None = None
    cost_center: str | None = None
    reference_code: str | None = None
    payment_method: str | None = None
    installments: int = 1
    notes: str | None = None
    attachments: tuple[str, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_overdue(self, today: date | None = None) -> bool:
        if self.due_date is None:
            return False
        today = today or utc_now().date()
        return self.due_date < today and self.status == TransactionStatus.PENDENTE.value

    def is_paid(self) -> bool:
        return self.status in _PAID_STATUSES

    def is_revenue(self) -> bool:
        return self.type == TransactionType.RECEITA.value

    def is_expense(self) -> bool:
        return self.type == TransactionType.DESPESA.value

    def settled_status(self) -> str:
        """Status a payment moves this transaction to."""
        if self.is_revenue():
            return TransactionStatus.RECEBIDO.value
        return TransactionStatus.PAGO.value

    def mark_as_paid(self, payment_date: date | None = None) -> "Transaction":
        return replace(
            self,
            status=self.settled_status(),
            payment_date=payment_date or utc_now().date(),
            updated_at=utc_now(),
        )


@dataclass
class Account:
    id: str
    name: str
    type: str | None
    balance: float
    is_active: bool

    def can_debit(self, amount: float) -> bool:
        return self.balance >= amount


@dataclass
class TransactionFilters:
    year: int | None = None
    month: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    account_ids: list[str] = field(default_factory=list)
    statuses: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    search_term: str | None = None

    def as_key(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v not in (None, [])}


@dataclass
class FinancialMetrics:
    receitas_em_aberto: float
    receitas_realizadas: float
    despesas_em_aberto: float
    despesas_realizadas: float
    accounts_balance: float
    monthly_cash_flow: float
    quarterly_growth: float
    period_start: date
    period_end: date
    calculated_at: datetime = field(default_factory=utc_now)

    @property
    def total_receitas(self) -> float:
        return self.receitas_em_aberto + self.receitas_realizadas

    @property
    def total_despesas(self) -> float:
        return self.despesas_em_aberto + self.despesas_realizadas

    @property
    def net_profit(self) -> float:
        return self.receitas_realizadas - self.despesas_realizadas

    @property
    def receitas_pending_percentage(self) -> float:
        total = self.total_receitas
        return self.receitas_em_aberto / total * 100 if total > 0 else 0.0

    @property
    def despesas_pending_percentage(self) -> float:
        total = self.total_despesas
        return self.despesas_em_aberto / total * 100 if total > 0 else 0.0

    def cash_flow_health(self) -> CashFlowHealth:
        ratio = self.monthly_cash_flow / max(self.despesas_realizadas, 1)
        if ratio > 0.5:
            return CashFlowHealth.HEALTHY
        if ratio > 0.2:
            return CashFlowHealth.WARNING
        return CashFlowHealth.CRITICAL

    def growth_trend(self) -> GrowthTrend:
        if self.quarterly_growth > 5:
            return GrowthTrend.UP
        if self.quarterly_growth < -5:
            return GrowthTrend.DOWN
        return GrowthTrend.STABLE


@dataclass
class BulkUpdateResult:
    success: bool
    updated_count: int
    failed_ids: list[str]
    errors: list[str] = field(default_factory=list)
