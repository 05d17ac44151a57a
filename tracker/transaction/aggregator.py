"""Monthly aggregation of a user's transactions."""

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple

from tracker.core.errors import AggregationFailed, ValidationError
from tracker.transaction.models import Transaction
from tracker.transaction.repository import TransactionRepository
from tracker.transaction.schemas import CENTS, TransactionStatus, TransactionSummary

logger = logging.getLogger(__name__)

MIN_YEAR, MAX_YEAR = 1900, 2100


@dataclass
class MonthlyReport:
    records: List[Transaction]
    summary: TransactionSummary


def _parse_int(value: str) -> Optional[int]:
    """Plain ASCII digits only, no sign, underscores or other scripts."""
    if not isinstance(value, str) or not re.fullmatch(r"[0-9]+", value.strip()):
        return None
    return int(value.strip())


def parse_period(year: Optional[str], month: Optional[str]) -> Tuple[int, int]:
    """Validate raw year/month query values and return them as integers."""
    if not year or not month:
        raise ValidationError("Year and month are required")

    month_num = _parse_int(month)
    if month_num is None or not 1 <= month_num <= 12:
        raise ValidationError("Invalid month format")

    year_num = _parse_int(year)
    if year_num is None or not MIN_YEAR <= year_num <= MAX_YEAR:
        raise ValidationError("Invalid year format")

    return year_num, month_num


def month_range(year: int, month: int) -> Tuple[datetime, datetime]:
    """Half-open [start, end) covering the calendar month."""
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def _round(amount: Decimal) -> float:
    return float(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def summarize(records: Iterable[Transaction]) -> TransactionSummary:
    """
    Sum income and outcome nominals and derive the balance.

    Records without a nominal contribute nothing. Totals are rounded half
    away from zero to cents.
    """
    total_income = Decimal("0")
    total_outcome = Decimal("0")
    for record in records:
        if record.nominal is None:
            continue
        nominal = Decimal(str(record.nominal))
        if record.status == TransactionStatus.INCOME.value:
            total_income += nominal
        elif record.status == TransactionStatus.OUTCOME.value:
            total_outcome += nominal

    return TransactionSummary(
        total_income=_round(total_income),
        total_outcome=_round(total_outcome),
        balance=_round(total_income - total_outcome),
    )


class MonthlyAggregator:
    """Builds the monthly report for one user."""

    def __init__(self, repository: TransactionRepository, timeout: Optional[float] = None):
        self.repository = repository
        self.timeout = timeout

    async def report(self, user_id: int, year: Optional[str], month: Optional[str]) -> MonthlyReport:
        year_num, month_num = parse_period(year, month)
        start, end = month_range(year_num, month_num)

        try:
            records = await asyncio.wait_for(
                self.repository.get_between(user_id, start, end),
                timeout=self.timeout,
            )
        except Exception as exc:
            logger.error(
                f"Error fetching transactions for user_id {user_id} ({year_num}-{month_num:02d}): {exc!r}",
                exc_info=True,
            )
            raise AggregationFailed() from exc

        return MonthlyReport(records=records, summary=summarize(records))
