"""TransactionApplicationService: transactions, bulk updates and metrics.

Reads are cache-aside on the shared TTLCache:
  transactions_{request json}        list pages
  financial_metrics_{request json}   metrics + insights (not for real-time)

Writes commit first, then clear both key spaces (and the touched ids).
"""

import asyncio
import calendar
import logging
import math
from datetime import date
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.op_cache.cache_aside import cached_query, invalidate, make_cache_key
from src.op_cache.ttl_cache import TTLCache
from src.op_common.datetime_utils import utc_now
from src.op_common.enums import TransactionStatus, TransactionType
from src.op_common.errors import (
    AccountInactiveError,
    AccountNotFoundError,
    InsufficientBalanceError,
    InternalError,
)
from src.op_finance.application.schemas import (
    MAX_BULK_IDS,
    BulkUpdateFields,
    CreateTransactionRequest,
    CreateTransactionResponse,
    FinancialMetricsOut,
    FinancialMetricsQuery,
    FinancialMetricsResponse,
    InsightsOut,
    SortField,
    SortOrder,
    TransactionItem,
    TransactionPage,
)
from src.op_finance.domain.insights import generate_insights
from src.op_finance.domain.models import BulkUpdateResult, Transaction, TransactionFilters
from src.op_finance.domain.repository import (
    AccountRepositoryProtocol,
    MetricsRepositoryProtocol,
    TransactionRepositoryProtocol,
)
from src.op_finance.infrastructure.persistence import (
    AccountRepository,
    MetricsRepository,
    TransactionRepository,
)

logger = logging.getLogger(__name__)

TRANSACTIONS_PREFIX = "transactions"
METRICS_PREFIX = "financial_metrics"

CREATE_TIMEOUT_SECONDS = 8.0


def _sort_key(sort_by: SortField) -> Any:
    if sort_by == "amount":
        return lambda t: t.amount
    if sort_by == "description":
        return lambda t: t.description.casefold()
    return lambda t: t.transaction_date


def _month_period(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


class TransactionApplicationService:
    def __init__(
        self,
        cache: TTLCache,
        tx_repo: TransactionRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
        metrics_repo: MetricsRepositoryProtocol | None = None,
    ) -> None:
        self._cache = cache
        self._tx_repo: TransactionRepositoryProtocol = tx_repo or TransactionRepository()
        self._account_repo: AccountRepositoryProtocol = account_repo or AccountRepository()
        self._metrics_repo: MetricsRepositoryProtocol = metrics_repo or MetricsRepository()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_transactions(
        self,
        db: AsyncSession,
        filters: TransactionFilters,
        page: int = 1,
        limit: int = 50,
        sort_by: SortField | None = None,
        sort_order: SortOrder = "desc",
    ) -> TransactionPage:
        key = make_cache_key(
            TRANSACTIONS_PREFIX,
            {
                "filters": filters.as_key(),
                "page": page,
                "limit": limit,
                "sort_by": sort_by,
                "sort_order": sort_order,
            },
        )

        async def fetch() -> TransactionPage:
            transactions = await self._tx_repo.find_all(db, filters)
            total = await self._tx_repo.count_by_filters(db, filters)
            if sort_by:
                transactions = sorted(
                    transactions, key=_sort_key(sort_by), reverse=sort_order == "desc"
                )
            start = (page - 1) * limit
            total_pages = math.ceil(total / limit)
            return TransactionPage(
                transactions=[
                    TransactionItem.from_domain(t) for t in transactions[start:start + limit]
                ],
                total_count=total,
                page=page,
                limit=limit,
                total_pages=total_pages,
                has_next=page < total_pages,
                has_previous=page > 1,
            )

        return await cached_query(self._cache, key, fetch)

    async def get_financial_metrics(
        self, db: AsyncSession, query: FinancialMetricsQuery
    ) -> FinancialMetricsResponse:
        async def fetch() -> FinancialMetricsResponse:
            start, end = self._resolve_period(query)
            metrics = await self._metrics_repo.get_by_period(db, start, end)
            return FinancialMetricsResponse(
                metrics=FinancialMetricsOut.from_domain(metrics),
                insights=InsightsOut.from_domain(generate_insights(metrics)),
            )

        if query.real_time:
            return await fetch()
        key = make_cache_key(METRICS_PREFIX, query.model_dump(exclude_defaults=True))
        return await cached_query(self._cache, key, fetch)

    @staticmethod
    def _resolve_period(query: FinancialMetricsQuery) -> tuple[date, date]:
        today = utc_now().date()
        if query.real_time:
            return date(today.year, 1, 1), today
        if query.start_date and query.end_date:
            return query.start_date, query.end_date
        if query.year and query.month:
            return _month_period(query.year, query.month)
        year = query.year or today.year
        return date(year, 1, 1), date(year, 12, 31)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_transaction(
        self, db: AsyncSession, request: CreateTransactionRequest
    ) -> CreateTransactionResponse:
        try:
            async with asyncio.timeout(CREATE_TIMEOUT_SECONDS):
                response = await self._create(db, request)
            await db.commit()
        except TimeoutError as exc:
            await db.rollback()
            raise InternalError("Transaction timeout") from exc
        except Exception:
            await db.rollback()
            raise

        self.invalidate_cache()
        logger.info(
            "Transaction created: id=%s type=%s amount=%.2f",
            response.transaction.id,
            response.transaction.type,
            response.transaction.amount,
        )
        return response

    async def _create(
        self, db: AsyncSession, request: CreateTransactionRequest
    ) -> CreateTransactionResponse:
        account = await self._account_repo.find_by_id(db, request.account_id)
        if account is None:
            raise AccountNotFoundError(request.account_id)
        if not account.is_active:
            raise AccountInactiveError(request.account_id)

        is_revenue = request.type is TransactionType.RECEITA
        if request.is_paid and not is_revenue and not account.can_debit(request.amount):
            raise InsufficientBalanceError(request.amount, account.balance)

        today = utc_now().date()
        values = request.model_dump(exclude={"is_paid"}, mode="json")
        values["transaction_date"] = request.transaction_date or today
        values["due_date"] = request.due_date
        if request.is_paid:
            values["status"] = (
                TransactionStatus.RECEBIDO.value if is_revenue else TransactionStatus.PAGO.value
            )
            values["payment_date"] = today
        else:
            values["status"] = TransactionStatus.PENDENTE.value

        transaction = await self._tx_repo.create(db, values)

        balance = account.balance
        if request.is_paid:
            balance += request.amount if is_revenue else -request.amount
            await self._account_repo.update_balance(db, account.id, balance)

        return CreateTransactionResponse(
            transaction=TransactionItem.from_domain(transaction),
            account_balance=balance,
        )

    async def bulk_update(
        self,
        db: AsyncSession,
        transaction_ids: list[str],
        updates: BulkUpdateFields,
    ) -> BulkUpdateResult:
        if not transaction_ids:
            return BulkUpdateResult(
                success=False, updated_count=0, failed_ids=[],
                errors=["No transaction selected"],
            )

        errors: list[str] = []
        if len(transaction_ids) > MAX_BULK_IDS:
            errors.append(f"At most {MAX_BULK_IDS} transactions per operation")
        changes = updates.model_dump(exclude_none=True)
        if not changes:
            errors.append("No update specified")
        if errors:
            return BulkUpdateResult(success=False, updated_count=0, failed_ids=[], errors=errors)

        logger.info("Bulk updating %d transactions: %s", len(transaction_ids), changes)
        try:
            if updates.settles():
                result = await self._settle_each(db, transaction_ids, changes)
            else:
                count = await self._tx_repo.bulk_update(db, transaction_ids, changes)
                result = BulkUpdateResult(success=True, updated_count=count, failed_ids=[])
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        self.invalidate_cache(*transaction_ids)
        return result

    async def _settle_each(
        self, db: AsyncSession, transaction_ids: list[str], changes: dict[str, Any]
    ) -> BulkUpdateResult:
        """Mark transactions paid one by one, moving account balances.

        Already-paid transactions are skipped. Missing transactions/accounts,
        expenses the account cannot cover and items that raise are reported
        as failed. Each item runs in its own savepoint.
        """
        failed: list[str] = []
        updated = 0
        today = utc_now().date()

        for transaction_id in transaction_ids:
            try:
                async with db.begin_nested():
                    ok = await self._settle_one(db, transaction_id, changes, today)
            except Exception:
                logger.exception("Error settling transaction %s", transaction_id)
                ok = False
            if ok is None:
                continue
            if ok:
                updated += 1
            else:
                failed.append(transaction_id)

        return BulkUpdateResult(
            success=not failed,
            updated_count=updated,
            failed_ids=failed,
            errors=[f"{len(failed)} transactions failed"] if failed else [],
        )

    async def _settle_one(
        self,
        db: AsyncSession,
        transaction_id: str,
        changes: dict[str, Any],
        today: date,
    ) -> bool | None:
        """True when settled, False when it failed, None when already paid."""
        transaction: Transaction | None = await self._tx_repo.find_by_id(db, transaction_id)
        if transaction is None:
            return False
        if transaction.is_paid():
            return None

        account = await self._account_repo.find_by_id(db, transaction.account_id)
        if account is None:
            return False

        if transaction.is_revenue():
            new_balance = account.balance + transaction.amount
        else:
            if not account.can_debit(transaction.amount):
                return False
            new_balance = account.balance - transaction.amount

        await self._account_repo.update_balance(db, account.id, new_balance)
        paid = transaction.mark_as_paid(today)
        await self._tx_repo.update(
            db,
            transaction_id,
            {**changes, "status": paid.status, "payment_date": paid.payment_date},
        )
        return True

    def invalidate_cache(self, *transaction_ids: str) -> int:
        return invalidate(
            self._cache, f"{TRANSACTIONS_PREFIX}_", f"{METRICS_PREFIX}_", *transaction_ids
        )
