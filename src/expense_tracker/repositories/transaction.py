"""Transaction repository with owner-scoped queries and aggregates."""
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import case, delete, extract, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.models.transaction import Transaction, TransactionType
from expense_tracker.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model.

    Every query except ``get_by_id`` is scoped to one owner.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def get_by_user(self, user_id: UUID) -> list[Transaction]:
        """Get all transactions for a user, newest first."""
        return await self.get_filtered(user_id)

    async def get_owned(self, transaction_id: UUID, user_id: UUID) -> Transaction | None:
        """Get a transaction only if it belongs to the user."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_filtered(
        self,
        user_id: UUID,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        month: int | None = None,
        year: int | None = None,
    ) -> list[Transaction]:
        """Get a user's transactions matching every given filter on created_at."""
        query = select(Transaction).where(Transaction.user_id == user_id)

        if start_date is not None:
            query = query.where(Transaction.created_at >= start_date)
        if end_date is not None:
            query = query.where(Transaction.created_at <= end_date)
        if month is not None:
            query = query.where(extract("month", Transaction.created_at) == month)
        if year is not None:
            query = query.where(extract("year", Transaction.created_at) == year)

        result = await self.db.execute(
            query.order_by(Transaction.created_at.desc()).execution_options(
                populate_existing=True
            )
        )
        return list(result.scalars().all())

    async def get_balance(self, user_id: UUID) -> Decimal:
        """Signed sum of a user's amounts (income positive, expense negative)."""
        signed = case(
            (Transaction.type == TransactionType.INCOME, Transaction.amount),
            else_=-Transaction.amount,
        )
        result = await self.db.execute(
            select(func.coalesce(func.sum(signed), 0)).where(Transaction.user_id == user_id)
        )
        total = result.scalar_one()
        return Decimal(str(total))

    async def update_owned(
        self, transaction_id: UUID, user_id: UUID, values: dict[str, Any]
    ) -> bool:
        """Atomically update a transaction if it belongs to the user.

        Returns:
            True if a row was updated
        """
        result = await self.db.execute(
            update(Transaction)
            .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        await self.db.commit()
        return result.rowcount > 0

    async def delete_owned(self, transaction_id: UUID, user_id: UUID) -> bool:
        """Atomically delete a transaction if it belongs to the user.

        Returns:
            True if a row was deleted
        """
        result = await self.db.execute(
            delete(Transaction)
            .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
            .execution_options(synchronize_session="fetch")
        )
        await self.db.commit()
        return result.rowcount > 0
