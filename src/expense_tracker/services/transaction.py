"""Transaction service: owner-scoped CRUD, filtering and aggregation."""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from uuid import UUID

from expense_tracker.core.exceptions import (
    InvalidRangeError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from expense_tracker.models.base import as_utc, utcnow
from expense_tracker.models.transaction import Transaction, TransactionType
from expense_tracker.repositories.transaction import TransactionRepository
from expense_tracker.schemas.transaction import SummaryResult

logger = logging.getLogger(__name__)


def _require_owner(user_id: UUID | None) -> UUID:
    if user_id is None:
        raise UnauthenticatedError()
    return user_id


def _validate_fields(amount, description, type_) -> tuple[Decimal, str, TransactionType]:
    """Check and coerce the editable fields of a transaction."""
    errors = {}

    try:
        amount = Decimal(str(amount)) if amount is not None else None
    except (InvalidOperation, ValueError):
        amount = None
    if amount is None or not amount.is_finite() or amount <= 0:
        errors["amount"] = "must be a positive number"

    if not isinstance(description, str) or not description.strip():
        errors["description"] = "is required"

    try:
        type_ = TransactionType(type_) if type_ is not None else None
    except ValueError:
        type_ = None
    if type_ is None:
        errors["type"] = "must be Income or Expense"

    if errors:
        raise ValidationError(details={"fields": errors})
    return amount, description.strip(), type_


class TransactionService:
    """Service for a user's transactions.

    Mutations take the caller's identity and apply ownership inside a single
    conditional statement; "not found" and "not yours" are indistinguishable.
    """

    def __init__(self, transaction_repo: TransactionRepository):
        self.transaction_repo = transaction_repo

    async def list_all(self, user_id: UUID | None) -> list[Transaction]:
        """All of the user's transactions, newest first."""
        return await self.transaction_repo.get_by_user(_require_owner(user_id))

    async def list_filtered(
        self,
        user_id: UUID | None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        month: int | None = None,
        year: int | None = None,
    ) -> list[Transaction]:
        """
        The user's transactions whose created_at matches every given filter.

        Args:
            user_id: Owner identity
            start_date: Inclusive lower bound
            end_date: Inclusive upper bound
            month: Calendar month (1-12)
            year: Calendar year

        Raises:
            InvalidRangeError: If start_date is after end_date
            ValidationError: If month is outside 1-12
        """
        user_id = _require_owner(user_id)
        start_date = as_utc(start_date) if start_date is not None else None
        end_date = as_utc(end_date) if end_date is not None else None
        if start_date is not None and end_date is not None and start_date > end_date:
            raise InvalidRangeError(
                details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()}
            )
        if month is not None and not 1 <= month <= 12:
            raise ValidationError(details={"fields": {"month": "must be between 1 and 12"}})

        return await self.transaction_repo.get_filtered(
            user_id, start_date=start_date, end_date=end_date, month=month, year=year
        )

    async def get_balance(self, user_id: UUID | None) -> Decimal:
        """Income minus expenses, computed in the database."""
        return await self.transaction_repo.get_balance(_require_owner(user_id))

    async def get_summary(self, user_id: UUID | None) -> SummaryResult:
        """Totals per type and net balance, computed from the full listing."""
        transactions = await self.list_all(user_id)

        total_income = sum(
            (t.amount for t in transactions if t.type == TransactionType.INCOME),
            Decimal("0"),
        )
        total_expenses = sum(
            (t.amount for t in transactions if t.type == TransactionType.EXPENSE),
            Decimal("0"),
        )
        return SummaryResult(
            total_income=total_income,
            total_expenses=total_expenses,
            balance=sum((t.signed_amount for t in transactions), Decimal("0")),
        )

    async def get(self, transaction_id: UUID) -> Transaction | None:
        """Fetch by id regardless of owner. Callers must check ownership."""
        return await self.transaction_repo.get_by_id(transaction_id)

    async def get_owned(self, transaction_id: UUID, user_id: UUID | None) -> Transaction:
        """
        Fetch a transaction belonging to the user.

        Raises:
            NotFoundError: If absent or owned by someone else
        """
        transaction = await self.transaction_repo.get_owned(
            transaction_id, _require_owner(user_id)
        )
        if transaction is None:
            raise NotFoundError(details={"transaction_id": str(transaction_id)})
        return transaction

    async def create(self, transaction: Transaction) -> Transaction:
        """
        Persist a new transaction.

        The caller sets ``user_id``; ``id`` and ``created_at`` are assigned
        here when missing.

        Raises:
            ValidationError: If amount, description or type are missing/invalid
        """
        _require_owner(transaction.user_id)
        amount, description, type_ = _validate_fields(
            transaction.amount, transaction.description, transaction.type
        )
        transaction.amount = amount
        transaction.description = description
        transaction.type = type_
        if transaction.created_at is None:
            transaction.created_at = utcnow()
        transaction.updated_at = None

        created = await self.transaction_repo.create(transaction)
        logger.info(
            "Transaction created",
            extra={"user_id": str(created.user_id), "transaction_id": str(created.id)},
        )
        return created

    async def update(
        self,
        transaction_id: UUID,
        user_id: UUID | None,
        amount: Decimal,
        description: str,
        type: TransactionType,
    ) -> None:
        """
        Overwrite amount, description and type; stamp updated_at.

        created_at and the owner are never changed.

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If absent or owned by someone else
        """
        user_id = _require_owner(user_id)
        amount, description, type_ = _validate_fields(amount, description, type)

        updated = await self.transaction_repo.update_owned(
            transaction_id,
            user_id,
            {
                "amount": amount,
                "description": description,
                "type": type_,
                "updated_at": utcnow(),
            },
        )
        if not updated:
            raise NotFoundError(details={"transaction_id": str(transaction_id)})

        logger.info(
            "Transaction updated",
            extra={"user_id": str(user_id), "transaction_id": str(transaction_id)},
        )

    async def delete(self, transaction_id: UUID, user_id: UUID | None) -> None:
        """
        Hard-delete a transaction.

        Raises:
            NotFoundError: If absent or owned by someone else
        """
        user_id = _require_owner(user_id)
        if not await self.transaction_repo.delete_owned(transaction_id, user_id):
            raise NotFoundError(details={"transaction_id": str(transaction_id)})

        logger.info(
            "Transaction deleted",
            extra={"user_id": str(user_id), "transaction_id": str(transaction_id)},
        )
