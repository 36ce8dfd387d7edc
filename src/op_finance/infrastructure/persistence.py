"""Finance repositories: raw text() SQL against the hosted database.

Tables: financial_transactions, accounts.
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from datetime import date
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.op_finance.domain.models import Account, FinancialMetrics, Transaction, TransactionFilters

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_TX_COLUMNS = """
    id, description, amount, type, category, status, account_id,
    transaction_date, due_date, payment_date, client_id, supplier_id,
    cost_center, reference_code, payment_method, installments, notes,
    attachments, created_at, updated_at
"""

_TX_WHERE = """
    WHERE
        (CAST(:year AS INTEGER) IS NULL
            OR EXTRACT(YEAR FROM transaction_date) = CAST(:year AS INTEGER))
        AND (CAST(:month AS INTEGER) IS NULL
            OR EXTRACT(MONTH FROM transaction_date) = CAST(:month AS INTEGER))
        AND (CAST(:start_date AS DATE) IS NULL OR transaction_date >= CAST(:start_date AS DATE))
        AND (CAST(:end_date AS DATE) IS NULL OR transaction_date <= CAST(:end_date AS DATE))
        AND (CAST(:account_ids AS TEXT[]) IS NULL
            OR account_id::text = ANY(CAST(:account_ids AS TEXT[])))
        AND (CAST(:statuses AS TEXT[]) IS NULL OR status = ANY(CAST(:statuses AS TEXT[])))
        AND (CAST(:types AS TEXT[]) IS NULL OR type = ANY(CAST(:types AS TEXT[])))
        AND (CAST(:search AS TEXT) IS NULL OR description ILIKE CAST(:search AS TEXT))
"""

_FIND_BY_ID_SQL = text(f"""
    SELECT {_TX_COLUMNS} FROM financial_transactions WHERE id = :id
""")

_FIND_ALL_SQL = text(f"""
    SELECT {_TX_COLUMNS} FROM financial_transactions
    {_TX_WHERE}
    ORDER BY transaction_date DESC
""")

_COUNT_SQL = text(f"""
    SELECT COUNT(*) AS total FROM financial_transactions
    {_TX_WHERE}
""")

_BULK_UPDATE_COLUMNS = ("status", "category", "cost_center", "notes")

# Columns create/update may write; anything else is ignored.
WRITABLE_COLUMNS = frozenset({
    "description",
    "amount",
    "type",
    "category",
    "status",
    "account_id",
    "transaction_date",
    "due_date",
    "payment_date",
    "client_id",
    "supplier_id",
    "cost_center",
    "reference_code",
    "payment_method",
    "installments",
    "notes",
})

_GET_ACCOUNT_SQL = text("""
    SELECT id, name, type, balance, is_active FROM accounts WHERE id = :id
""")

_UPDATE_BALANCE_SQL = text("""
    UPDATE accounts SET balance = :balance, updated_at = NOW() WHERE id = :id
""")

# Realized = recebido/pago; open = pendente/vencido.
# monthly_cash_flow: realized net over the last 30 days of the period.
# quarterly_growth: realized revenue of the last 90 days vs the 90 before, in %.
_METRICS_SQL = text("""
    WITH tx AS (
        SELECT type, status, amount, transaction_date, payment_date
        FROM financial_transactions
        WHERE transaction_date BETWEEN :start AND :end
           OR payment_date BETWEEN CAST(:end AS DATE) - 180 AND :end
    )
    SELECT
        COALESCE(SUM(amount) FILTER (WHERE type = 'receita'
            AND status IN ('pendente', 'vencido')
            AND transaction_date BETWEEN :start AND :end), 0) AS receitas_em_aberto,
        COALESCE(SUM(amount) FILTER (WHERE type = 'receita' AND status = 'recebido'
            AND transaction_date BETWEEN :start AND :end), 0) AS receitas_realizadas,
        COALESCE(SUM(amount) FILTER (WHERE type = 'despesa'
            AND status IN ('pendente', 'vencido')
            AND transaction_date BETWEEN :start AND :end), 0) AS despesas_em_aberto,
        COALESCE(SUM(amount) FILTER (WHERE type = 'despesa' AND status = 'pago'
            AND transaction_date BETWEEN :start AND :end), 0) AS despesas_realizadas,
        COALESCE(SUM(CASE WHEN type = 'receita' THEN amount ELSE -amount END) FILTER (
            WHERE status IN ('recebido', 'pago')
              AND payment_date > CAST(:end AS DATE) - 30 AND payment_date <= :end), 0)
            AS monthly_cash_flow,
        COALESCE(SUM(amount) FILTER (WHERE type = 'receita' AND status = 'recebido'
            AND payment_date > CAST(:end AS DATE) - 90 AND payment_date <= :end), 0)
            AS revenue_recent,
        COALESCE(SUM(amount) FILTER (WHERE type = 'receita' AND status = 'recebido'
            AND payment_date > CAST(:end AS DATE) - 180
            AND payment_date <= CAST(:end AS DATE) - 90), 0) AS revenue_previous,
        (SELECT COALESCE(SUM(balance), 0) FROM accounts WHERE is_active = TRUE)
            AS accounts_balance
    FROM tx
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_transaction(row: Any) -> Transaction:
    return Transaction(
        id=str(row.id),
        description=row.description,
        amount=float(row.amount),
        type=row.type,
        category=row.category,
        status=row.status,
        account_id=str(row.account_id),
        transaction_date=row.transaction_date,
        due_date=row.due_date,
        payment_date=row.payment_date,
        client_id=str(row.client_id) if row.client_id else None,
        supplier_id=str(row.supplier_id) if row.supplier_id else None,
        cost_center=row.cost_center,
        reference_code=row.reference_code,
        payment_method=row.payment_method,
        installments=row.installments or 1,
        notes=row.notes,
        attachments=tuple(row.attachments or ()),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _filter_params(filters: TransactionFilters) -> dict[str, Any]:
    search = filters.search_term.strip() if filters.search_term else None
    return {
        "year": filters.year,
        "month": filters.month,
        "start_date": filters.start_date,
        "end_date": filters.end_date,
        "account_ids": filters.account_ids or None,
        "statuses": filters.statuses or None,
        "types": filters.types or None,
        "search": f"%{search}%" if search else None,
    }


def _writable(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if k in WRITABLE_COLUMNS}


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class TransactionRepository:
    async def find_by_id(self, db: AsyncSession, transaction_id: str) -> Transaction | None:
        result = await db.execute(_FIND_BY_ID_SQL, {"id": transaction_id})
        row = result.fetchone()
        return _row_to_transaction(row) if row else None

    async def find_all(
        self, db: AsyncSession, filters: TransactionFilters
    ) -> list[Transaction]:
        result = await db.execute(_FIND_ALL_SQL, _filter_params(filters))
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def count_by_filters(self, db: AsyncSession, filters: TransactionFilters) -> int:
        result = await db.execute(_COUNT_SQL, _filter_params(filters))
        return int(result.scalar_one())

    async def create(self, db: AsyncSession, values: dict[str, Any]) -> Transaction:
        data = _writable(values)
        columns = sorted(data)
        stmt = text(
            f"INSERT INTO financial_transactions ({', '.join(columns)}) "
            f"VALUES ({', '.join(':' + c for c in columns)}) "
            f"RETURNING {_TX_COLUMNS}"
        )
        result = await db.execute(stmt, data)
        return _row_to_transaction(result.fetchone())

    async def update(
        self, db: AsyncSession, transaction_id: str, changes: dict[str, Any]
    ) -> Transaction | None:
        data = _writable(changes)
        if not data:
            return await self.find_by_id(db, transaction_id)
        assignments = ", ".join(f"{c} = :{c}" for c in sorted(data))
        stmt = text(
            f"UPDATE financial_transactions SET {assignments}, updated_at = NOW() "
            f"WHERE id = :id RETURNING {_TX_COLUMNS}"
        )
        result = await db.execute(stmt, {**data, "id": transaction_id})
        row = result.fetchone()
        return _row_to_transaction(row) if row else None

    async def bulk_update(
        self, db: AsyncSession, transaction_ids: list[str], changes: dict[str, Any]
    ) -> int:
        data = {k: v for k, v in changes.items() if k in _BULK_UPDATE_COLUMNS}
        if not data:
            return 0
        assignments = ", ".join(f"{c} = :{c}" for c in sorted(data))
        stmt = text(
            f"UPDATE financial_transactions SET {assignments}, updated_at = NOW() "
            f"WHERE id::text = ANY(CAST(:ids AS TEXT[]))"
        )
        result = await db.execute(stmt, {**data, "ids": transaction_ids})
        return int(result.rowcount)  # type: ignore[attr-defined]


class AccountRepository:
    async def find_by_id(self, db: AsyncSession, account_id: str) -> Account | None:
        result = await db.execute(_GET_ACCOUNT_SQL, {"id": account_id})
        row = result.fetchone()
        if row is None:
            return None
        return Account(
            id=str(row.id),
            name=row.name,
            type=row.type,
            balance=float(row.balance or 0),
            is_active=bool(row.is_active),
        )

    async def update_balance(
        self, db: AsyncSession, account_id: str, new_balance: float
    ) -> None:
        await db.execute(_UPDATE_BALANCE_SQL, {"id": account_id, "balance": new_balance})


class MetricsRepository:
    async def get_by_period(
        self, db: AsyncSession, start: date, end: date
    ) -> FinancialMetrics:
        result = await db.execute(_METRICS_SQL, {"start": start, "end": end})
        row = result.fetchone()
        previous = float(row.revenue_previous)
        recent = float(row.revenue_recent)
        growth = (recent - previous) / previous * 100 if previous > 0 else 0.0
        return FinancialMetrics(
            receitas_em_aberto=float(row.receitas_em_aberto),
            receitas_realizadas=float(row.receitas_realizadas),
            despesas_em_aberto=float(row.despesas_em_aberto),
            despesas_realizadas=float(row.despesas_realizadas),
            accounts_balance=float(row.accounts_balance),
            monthly_cash_flow=float(row.monthly_cash_flow),
            quarterly_growth=growth,
            period_start=start,
            period_end=end,
        )
