"""Repository for transaction operations."""

from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.transaction.models import Transaction
from tracker.transaction import schemas


class TransactionRepository:
    """Repository for transaction operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user_id: int, transaction: schemas.TransactionCreate) -> Transaction:
        """Create a new transaction owned by the given user."""
        db_transaction = Transaction(
            user_id=user_id,
            nominal=transaction.nominal,
            transaction_date=transaction.transaction_date,
            status=transaction.status.value,
            description=transaction.description,
        )
        self.session.add(db_transaction)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(db_transaction)
        return db_transaction

    async def get_between(self, user_id: int, start: datetime, end: datetime) -> List[Transaction]:
        """
        Get the user's transactions dated in [start, end).

        Most recent first; records sharing a date come newest-inserted first.
        """
        result = await self.session.execute(
            select(Transaction)
            .where(
                Transaction.user_id == user_id,
                Transaction.transaction_date >= start,
                Transaction.transaction_date < end,
            )
            .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
        )
        return list(result.scalars().all())
