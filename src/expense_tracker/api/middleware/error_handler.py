"""Global error handling.

All exceptions are converted to a standardized JSON body with an
appropriate HTTP status code. Internal details never reach the client.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from expense_tracker.config import settings
from expense_tracker.core.errors import error_body
from expense_tracker.core.exceptions import ExpenseTrackerError

logger = logging.getLogger(__name__)


def _request_context(request: Request) -> dict:
    state = request.scope.get("state") or {}
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": state.get("request_id"),
        "user_id": state.get("user_id"),
    }


async def handle_domain_error(request: Request, exc: ExpenseTrackerError) -> JSONResponse:
    """Handle errors raised by the service layer.

    Args:
        request: The incoming request
        exc: The domain exception

    Returns:
        JSONResponse with error details from catalog
    """
    extra = {"error_code": exc.error_code, **_request_context(request)}
    if settings.debug:
        extra["details"] = exc.details

    if exc.http_status >= 500:
        logger.error(f"Domain error: {exc.error_code}", extra=extra)
    else:
        logger.warning(f"Domain error: {exc.error_code}", extra=extra)

    headers = None
    if exc.http_status == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.http_status,
        content=error_body(exc.error_code),
        headers=headers,
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Args:
        request: The incoming request
        exc: The validation error

    Returns:
        JSONResponse with validation error details
    """
    errors = exc.errors()
    error_messages = []

    for error in errors:
        field = ".".join(str(x) for x in error.get("loc", []))
        msg = error.get("msg", "Invalid value")
        error_messages.append(f"{field}: {msg}")

    extra = _request_context(request)
    if settings.debug:
        extra["errors"] = [
            {"loc": e.get("loc"), "msg": e.get("msg"), "type": e.get("type")} for e in errors
        ]
    logger.warning(f"Validation error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("VAL_001", " | ".join(error_messages)),
    )


async def handle_integrity_error(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Handle database integrity errors.

    Args:
        request: The incoming request
        exc: The integrity error

    Returns:
        JSONResponse with error details
    """
    # Do not log str(exc): it can include SQL + bound parameters.
    if settings.debug:
        logger.exception(
            f"Database integrity error on {request.url.path}",
            extra=_request_context(request),
        )
    else:
        logger.error(
            f"Database integrity error on {request.url.path}",
            extra=_request_context(request),
        )

    error_msg = str(exc).lower()
    if "unique" in error_msg or "duplicate" in error_msg:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error_body("DB_002"),
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("DB_001"),
    )


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Args:
        request: The incoming request
        exc: The unexpected exception

    Returns:
        JSONResponse with generic error message
    """
    extra = {"error_type": type(exc).__name__, **_request_context(request)}
    # In non-debug: do not log str(exc) or traceback (may include sensitive data).
    if settings.debug:
        logger.exception(f"Unexpected error on {request.url.path}", extra=extra)
    else:
        logger.error(f"Unexpected error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("SYS_001"),
    )
