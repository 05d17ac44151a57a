"""Script to seed demo data into the database."""

import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import delete

from tracker.core.database import DatabaseManager
from tracker.core.security import PasswordHasher
from tracker.user.models import User
from tracker.transaction.models import Transaction

logger = logging.getLogger(__name__)

DEMO_USERNAME = "tester"
DEMO_PASSWORD = "password123"


async def seed_data(db_manager: Optional[DatabaseManager] = None) -> User:
    """Replace all users and transactions with one demo user and its October 2025 records."""
    db_manager = db_manager or DatabaseManager()
    await db_manager.create_tables()

    async with db_manager.get_db() as db:
        # Clear existing data
        await db.execute(delete(Transaction))
        await db.execute(delete(User))

        user = User(username=DEMO_USERNAME, password=PasswordHasher().hash(DEMO_PASSWORD))
        db.add(user)
        await db.commit()
        await db.refresh(user)

        transactions = [
            Transaction(
                user_id=user.id,
                nominal=Decimal("5000000.00"),
                transaction_date=datetime(2025, 10, 1),
                status="income",
                description="Monthly salary",
            ),
            Transaction(
                user_id=user.id,
                nominal=Decimal("500000.00"),
                transaction_date=datetime(2025, 10, 5),
                status="outcome",
                description="Electricity bill",
            ),
        ]
        db.add_all(transactions)
        await db.commit()

    logger.info(f"Seeding completed for user {DEMO_USERNAME!r} (ID: {user.id})")
    return user


async def main() -> None:
    db_manager = DatabaseManager()
    try:
        await seed_data(db_manager)
    finally:
        await db_manager.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
