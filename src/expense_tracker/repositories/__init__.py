"""Data access layer."""
from expense_tracker.repositories.transaction import TransactionRepository
from expense_tracker.repositories.user import UserRepository

__all__ = ["TransactionRepository", "UserRepository"]
