"""Pydantic schemas for transaction data validation."""

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

CENTS = Decimal("0.01")
# Numeric(14, 2) holds twelve integer digits
MAX_NOMINAL = Decimal("1000000000000")


class TransactionStatus(str, Enum):
    INCOME = "income"
    OUTCOME = "outcome"


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, snake_case is accepted too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionCreate(CamelModel):
    """Schema for transaction creation."""
    nominal: Decimal = Field(..., ge=0, lt=MAX_NOMINAL)
    transaction_date: datetime
    status: TransactionStatus
    description: Optional[str] = Field(None, max_length=255)

    @field_validator("nominal")
    @classmethod
    def to_cents(cls, value: Decimal) -> Decimal:
        try:
            return value.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise ValueError("nominal is out of range") from exc

    @field_validator("transaction_date", mode="before")
    @classmethod
    def accept_plain_date(cls, value: Any) -> Any:
        """A bare ISO date means midnight of that day."""
        if isinstance(value, str) and len(value.strip()) == 10:
            return f"{value.strip()}T00:00:00"
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime(value.year, value.month, value.day)
        return value

    @field_validator("transaction_date")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class TransactionRead(CamelModel):
    """Schema for transaction response."""
    id: int
    user_id: int
    nominal: Optional[Decimal] = None
    transaction_date: datetime
    status: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("nominal")
    def format_nominal(self, value: Optional[Decimal]) -> Optional[str]:
        if value is None:
            return None
        return f"{value:.2f}"


class TransactionSummary(CamelModel):
    """Monthly totals, rounded to cents."""
    total_income: float = 0.0
    total_outcome: float = 0.0
    balance: float = 0.0


class TransactionResponse(BaseModel):
    """Envelope for a single created transaction."""
    success: bool = True
    data: TransactionRead


class MonthlyTransactionsResponse(BaseModel):
    """Envelope for a monthly report."""
    success: bool = True
    data: List[TransactionRead]
    summary: TransactionSummary
