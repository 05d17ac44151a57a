"""Transaction endpoints for the API."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.errors import InsertFailed
from tracker.core.init_db import get_db
from tracker.transaction.aggregator import MonthlyAggregator
from tracker.transaction.repository import TransactionRepository
from tracker.transaction import schemas
from tracker.user.schemas import SessionUser
from restapi.endpoints.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/transaction",
    tags=["transactions"],
)


@router.post("", response_model=schemas.TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_in: schemas.TransactionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
) -> schemas.TransactionResponse:
    """Record an income or outcome for the current user."""
    repo = TransactionRepository(db)
    try:
        record = await repo.create(current_user.id, transaction_in)
    except SQLAlchemyError as exc:
        logger.error(f"Error adding transaction for user_id {current_user.id}: {exc}", exc_info=True)
        raise InsertFailed() from exc

    return schemas.TransactionResponse(data=schemas.TransactionRead.model_validate(record))


@router.get("", response_model=schemas.MonthlyTransactionsResponse)
async def get_monthly_transactions(
    request: Request,
    year: Optional[str] = Query(None, description="Four digit year, 1900-2100"),
    month: Optional[str] = Query(None, description="Month number, 1-12"),
    db: AsyncSession = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
) -> schemas.MonthlyTransactionsResponse:
    """
    Get the current user's transactions for one calendar month.

    Returns the records, most recent first, together with:
    - total income
    - total outcome
    - balance (income minus outcome)
    """
    aggregator = MonthlyAggregator(
        TransactionRepository(db),
        timeout=request.app.state.settings.QUERY_TIMEOUT_SECONDS,
    )
    report = await aggregator.report(current_user.id, year, month)

    return schemas.MonthlyTransactionsResponse(
        data=[schemas.TransactionRead.model_validate(record) for record in report.records],
        summary=report.summary,
    )
