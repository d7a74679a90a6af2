"""Domain exception classes.

Services raise these; the API layer translates them into HTTP responses.
Each exception maps to a code in the error catalog (errors.py).
"""

from typing import Any


class ExpenseTrackerError(Exception):
    """Base exception for all domain errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "AUTH_002")
        details: Additional context about the error (for logging only)
        http_status: HTTP status code to return
    """

    default_code = "SYS_001"
    default_status = 500

    def __init__(
        self,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        """Initialize the exception.

        Args:
            error_code: Error code from errors.py (defaults per subclass)
            details: Additional error context (not shown to users)
            http_status: HTTP status code (defaults per subclass)
        """
        self.error_code = error_code or self.default_code
        self.details = details or {}
        self.http_status = http_status or self.default_status
        super().__init__(self.error_code)


class ValidationError(ExpenseTrackerError):
    """Raised when required fields are missing or malformed."""

    default_code = "VAL_001"
    default_status = 400


class InvalidRangeError(ExpenseTrackerError):
    """Raised when a start date falls after the end date."""

    default_code = "VAL_002"
    default_status = 400


class DuplicateEmailError(ExpenseTrackerError):
    """Raised when registering an email that is already taken."""

    default_code = "AUTH_001"
    default_status = 400


class InvalidCredentialsError(ExpenseTrackerError):
    """Raised on failed login.

    Unknown email and wrong password both raise this, with the same payload.
    """

    default_code = "AUTH_002"
    default_status = 401


class UnauthenticatedError(ExpenseTrackerError):
    """Raised when a request carries no valid identity token."""

    default_code = "AUTH_003"
    default_status = 401


class NotFoundError(ExpenseTrackerError):
    """Raised when a resource is absent or owned by someone else."""

    default_code = "RES_001"
    default_status = 404
