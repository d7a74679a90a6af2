"""Error codes and user-friendly messages.

Each error has:
- code: Unique identifier
- message: Technical description (safe to return to clients)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class ErrorDefinition:
    """Definition of a single error type."""

    code: str
    message: str
    user_message: str
    suggestion: str
    retry_allowed: bool


_DEFINITIONS = [
    # Validation
    ErrorDefinition(
        code="VAL_001",
        message="Request validation failed",
        user_message="Invalid input data",
        suggestion="Please check your input and try again",
        retry_allowed=True,
    ),
    ErrorDefinition(
        code="VAL_002",
        message="Start date cannot be after end date",
        user_message="The date range is invalid",
        suggestion="Choose a start date on or before the end date",
        retry_allowed=True,
    ),
    # Authentication
    ErrorDefinition(
        code="AUTH_001",
        message="Email already exists",
        user_message="An account with this email already exists",
        suggestion="Log in instead, or register with a different email",
        retry_allowed=False,
    ),
    ErrorDefinition(
        code="AUTH_002",
        message="Invalid email or password",
        user_message="Invalid email or password",
        suggestion="Check your credentials and try again",
        retry_allowed=True,
    ),
    ErrorDefinition(
        code="AUTH_003",
        message="User not authenticated",
        user_message="Your session is missing or has expired",
        suggestion="Log in again to get a new token",
        retry_allowed=True,
    ),
    # Resources
    ErrorDefinition(
        code="RES_001",
        message="Resource not found",
        user_message="The requested item was not found",
        suggestion="Check the identifier and try again",
        retry_allowed=False,
    ),
    # Database / system
    ErrorDefinition(
        code="DB_001",
        message="Database operation failed",
        user_message="A database error occurred",
        suggestion="Please try again later",
        retry_allowed=True,
    ),
    ErrorDefinition(
        code="DB_002",
        message="Resource already exists",
        user_message="This record already exists",
        suggestion="Please check if the record was already created",
        retry_allowed=False,
    ),
    ErrorDefinition(
        code="SYS_001",
        message="Internal server error",
        user_message="An unexpected error occurred",
        suggestion="Please try again later or contact support",
        retry_allowed=True,
    ),
]

ERROR_CATALOG: dict[str, dict] = {d.code: asdict(d) for d in _DEFINITIONS}


def get_error(code: str) -> dict:
    """Look up an error definition, falling back to the generic system error."""
    return ERROR_CATALOG.get(code, ERROR_CATALOG["SYS_001"])


def error_body(code: str, message: str | None = None) -> dict:
    """Build the JSON body returned for an error code."""
    info = get_error(code)
    return {
        "error_code": code,
        "message": message or info["message"],
        "user_message": info["user_message"],
        "suggestion": info["suggestion"],
        "retry_allowed": info["retry_allowed"],
    }
