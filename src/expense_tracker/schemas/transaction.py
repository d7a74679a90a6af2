"""Transaction request/response schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expense_tracker.models.base import as_utc
from expense_tracker.models.transaction import TransactionType


class TransactionCreate(BaseModel):
    """Request body for creating a transaction.

    ``user_id``, ``id`` and timestamps sent by clients are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=500)
    type: TransactionType

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class TransactionUpdate(TransactionCreate):
    """Request body for replacing a transaction's editable fields.

    An ``id`` in the body, if present, must match the path.
    """

    id: UUID | None = None


class TransactionResponse(BaseModel):
    """Response model for a single transaction."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    amount: Decimal
    description: str
    type: TransactionType
    created_at: datetime
    updated_at: datetime | None = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def in_utc(cls, value: datetime | None) -> datetime | None:
        # SQLite hands back naive UTC wall-clock values
        return as_utc(value) if value is not None else None


class TransactionFilter(BaseModel):
    """Optional filters on created_at; all given filters must match."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    month: int | None = Field(default=None, ge=1, le=12)
    year: int | None = Field(default=None, ge=1, le=9999)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None


class BalanceResult(BaseModel):
    """Net balance for the current user."""

    balance: Decimal


class SummaryResult(BaseModel):
    """Aggregate of income, expenses and net balance."""

    total_income: Decimal = Field(..., ge=0)
    total_expenses: Decimal = Field(..., ge=0)
    balance: Decimal
