"""Pydantic schemas for op_finance API requests and responses."""

from dataclasses import asdict
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from src.op_common.enums import PaymentMethod, TransactionStatus, TransactionType
from src.op_finance.domain.insights import FinancialInsights
from src.op_finance.domain.models import FinancialMetrics, Transaction

SortField = Literal["date", "amount", "description"]
SortOrder = Literal["asc", "desc"]

MAX_BULK_IDS = 100


class TransactionItem(BaseModel):
    id: str
    description: str
    amount: float
    type: str
    category: str
    status: str
    account_id: str
    transaction_date: date
    due_date: date | None
    payment_date: date | None
    client_id: str | None
    supplier_id: str | None
    cost_center: str | None
    reference_code: str | None
    payment_method: str | None
    installments: int
    notes: str | None
    attachments: list[str]
    is_overdue: bool

    @classmethod
    def from_domain(cls, t: Transaction) -> "TransactionItem":
        return cls(
            id=t.id,
            description=t.description,
            amount=t.amount,
            type=t.type,
            category=t.category,
            status=t.status,
            account_id=t.account_id,
            transaction_date=t.transaction_date,
            due_date=t.due_date,
            payment_date=t.payment_date,
            client_id=t.client_id,
            supplier_id=t.supplier_id,
            cost_center=t.cost_center,
            reference_code=t.reference_code,
            payment_method=t.payment_method,
            installments=t.installments,
            notes=t.notes,
            attachments=list(t.attachments),
            is_overdue=t.is_overdue(),
        )


class TransactionPage(BaseModel):
    transactions: list[TransactionItem]
    total_count: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_previous: bool


class CreateTransactionRequest(BaseModel):
    account_id: str
    amount: float = Field(..., gt=0)
    type: TransactionType
    is_paid: bool = False
    description: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1)
    transaction_date: date | None = None
    due_date: date | None = None
    payment_method: PaymentMethod | None = None
    installments: int = Field(1, ge=1, le=12)
    client_id: str | None = None
    supplier_id: str | None = None
    cost_center: str | None = None
    reference_code: str | None = None
    notes: str | None = None


class CreateTransactionResponse(BaseModel):
    transaction: TransactionItem
    account_balance: float


class BulkUpdateFields(BaseModel):
    status: Literal["recebido", "pago", "cancelado"] | None = None
    category: str | None = None
    cost_center: str | None = None
    notes: str | None = None

    def settles(self) -> bool:
        return self.status in (TransactionStatus.RECEBIDO.value, TransactionStatus.PAGO.value)


class BulkUpdateRequest(BaseModel):
    transaction_ids: list[str]
    updates: BulkUpdateFields


class BulkUpdateResponse(BaseModel):
    success: bool
    updated_count: int
    failed_ids: list[str]
    errors: list[str]


class FinancialMetricsQuery(BaseModel):
    year: int | None = Field(None, ge=2000, le=2100)
    month: int | None = Field(None, ge=1, le=12)
    start_date: date | None = None
    end_date: date | None = None
    real_time: bool = False

    @model_validator(mode="after")
    def _range_complete(self) -> "FinancialMetricsQuery":
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date and end_date must be given together")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class FinancialMetricsOut(BaseModel):
    receitas_em_aberto: float
    receitas_realizadas: float
    despesas_em_aberto: float
    despesas_realizadas: float
    total_receitas: float
    total_despesas: float
    accounts_balance: float
    monthly_cash_flow: float
    quarterly_growth: float
    period_start: date
    period_end: date
    calculated_at: str

    @classmethod
    def from_domain(cls, m: FinancialMetrics) -> "FinancialMetricsOut":
        return cls(
            receitas_em_aberto=m.receitas_em_aberto,
            receitas_realizadas=m.receitas_realizadas,
            despesas_em_aberto=m.despesas_em_aberto,
            despesas_realizadas=m.despesas_realizadas,
            total_receitas=m.total_receitas,
            total_despesas=m.total_despesas,
            accounts_balance=m.accounts_balance,
            monthly_cash_flow=m.monthly_cash_flow,
            quarterly_growth=m.quarterly_growth,
            period_start=m.period_start,
            period_end=m.period_end,
            calculated_at=m.calculated_at.isoformat(),
        )


class InsightsOut(BaseModel):
    cash_flow_health: str
    growth_trend: str
    pending_receitas_percentage: float
    pending_despesas_percentage: float
    net_profit: float
    recommendations: list[str]

    @classmethod
    def from_domain(cls, i: FinancialInsights) -> "InsightsOut":
        return cls(**asdict(i))


class FinancialMetricsResponse(BaseModel):
    metrics: FinancialMetricsOut
    insights: InsightsOut
