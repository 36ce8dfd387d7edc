"""Repository Protocols for op_finance."""

from datetime import date
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.op_finance.domain.models import Account, FinancialMetrics, Transaction, TransactionFilters


class TransactionRepositoryProtocol(Protocol):
    async def find_by_id(self, db: AsyncSession, transaction_id: str) -> Transaction | None: ...

    async def find_all(
        self, db: AsyncSession, filters: TransactionFilters
    ) -> list[Transaction]: ...

    async def count_by_filters(self, db: AsyncSession, filters: TransactionFilters) -> int: ...

    async def create(self, db: AsyncSession, values: dict[str, Any]) -> Transaction: ...

    async def update(
        self, db: AsyncSession, transaction_id: str, changes: dict[str, Any]
    ) -> Transaction | None: ...

    async def bulk_update(
        self, db: AsyncSession, transaction_ids: list[str], changes: dict[str, Any]
    ) -> int: ...


class AccountRepositoryProtocol(Protocol):
    async def find_by_id(self, db: AsyncSession, account_id: str) -> Account | None: ...

    async def update_balance(
        self, db: AsyncSession, account_id: str, new_balance: float
    ) -> None: ...


class MetricsRepositoryProtocol(Protocol):
    async def get_by_period(
        self, db: AsyncSession, start: date, end: date
    ) -> FinancialMetrics: ...
