"""op_finance REST endpoints.

GET  /transactions                 filtered, sorted, paginated (cached)
POST /transactions                 create; moves the balance when paid
POST /transactions/bulk-update     status/category/cost-center/notes for many ids
GET  /financial/metrics            metrics + insights (cached unless real_time)
"""

from dataclasses import asdict
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.op_cache.dependencies import get_cache
from src.op_cache.ttl_cache import TTLCache
from src.op_common.database import get_db_session
from src.op_common.errors import ValidationFailedError
from src.op_common.response import ApiResponse, success_response
from src.op_finance.application.schemas import (
    BulkUpdateRequest,
    BulkUpdateResponse,
    CreateTransactionRequest,
    FinancialMetricsQuery,
    SortField,
    SortOrder,
)
from src.op_finance.application.service import TransactionApplicationService
from src.op_finance.domain.models import TransactionFilters
from src.op_gateway.auth.dependencies import get_current_member
from src.op_team.domain.models import TeamMember

router = APIRouter(tags=["finance"])


def get_finance_service(
    cache: Annotated[TTLCache, Depends(get_cache)],
) -> TransactionApplicationService:
    return TransactionApplicationService(cache)


@router.get("/transactions")
async def list_transactions(
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[TransactionApplicationService, Depends(get_finance_service)],
    year: int | None = Query(None, ge=2000, le=2100),
    month: int | None = Query(None, ge=1, le=12),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    account_id: Annotated[list[str], Query()] = [],  # noqa: B006
    status: Annotated[list[str], Query()] = [],  # noqa: B006
    type: Annotated[list[str], Query()] = [],  # noqa: B006, A002
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    sort_by: SortField | None = Query(None),
    sort_order: SortOrder = Query("desc"),
) -> ApiResponse:
    filters = TransactionFilters(
        year=year,
        month=month,
        start_date=start_date,
        end_date=end_date,
        account_ids=account_id,
        statuses=status,
        types=type,
        search_term=search,
    )
    result = await service.list_transactions(db, filters, page, limit, sort_by, sort_order)
    return success_response(result.model_dump(mode="json"))


@router.post("/transactions")
async def create_transaction(
    body: CreateTransactionRequest,
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[TransactionApplicationService, Depends(get_finance_service)],
) -> ApiResponse:
    result = await service.create_transaction(db, body)
    return success_response(result.model_dump(mode="json"), message="Transaction created")


@router.post("/transactions/bulk-update")
async def bulk_update_transactions(
    body: BulkUpdateRequest,
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[TransactionApplicationService, Depends(get_finance_service)],
) -> ApiResponse:
    result = await service.bulk_update(db, body.transaction_ids, body.updates)
    payload = BulkUpdateResponse(**asdict(result))
    resp = success_response(payload.model_dump())
    resp.success = payload.success
    return resp


@router.get("/financial/metrics")
async def financial_metrics(
    current_member: Annotated[TeamMember, Depends(get_current_member)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[TransactionApplicationService, Depends(get_finance_service)],
    year: int | None = Query(None),
    month: int | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    real_time: bool = Query(False),
) -> ApiResponse:
    try:
        query = FinancialMetricsQuery(
            year=year, month=month, start_date=start_date, end_date=end_date,
            real_time=real_time,
        )
    except ValidationError as exc:
        raise ValidationFailedError(exc.errors()[0]["msg"]) from None
    result = await service.get_financial_metrics(db, query)
    return success_response(result.model_dump(mode="json"))
