"""User model for authentication and data ownership."""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from expense_tracker.models.base import BaseModel

DEFAULT_ROLE = "User"


class User(BaseModel):
    """User model representing registered account holders."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(50), default=DEFAULT_ROLE, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role})>"
