"""FastAPI dependency injection for authentication and database."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.config import Settings, get_settings
from expense_tracker.core.exceptions import UnauthenticatedError
from expense_tracker.core.security import TokenClaims, TokenService
from expense_tracker.db.session import get_db
from expense_tracker.repositories.transaction import TransactionRepository
from expense_tracker.repositories.user import UserRepository
from expense_tracker.services.identity import IdentityService
from expense_tracker.services.transaction import TransactionService

# Missing/malformed headers are reported as 401 by get_current_identity.
security = HTTPBearer(auto_error=False)


def get_token_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenService:
    """Build the token service from process-wide settings."""
    return TokenService.from_settings(settings)


async def get_user_repository(
    db: AsyncSession = Depends(get_db),
) -> UserRepository:
    return UserRepository(db)


async def get_transaction_repository(
    db: AsyncSession = Depends(get_db),
) -> TransactionRepository:
    return TransactionRepository(db)


async def get_identity_service(
    user_repo: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
) -> IdentityService:
    """
    Get identity service instance.

    Args:
        user_repo: User repository
        token_service: Token issuer

    Returns:
        IdentityService instance
    """
    return IdentityService(user_repo, token_service)


async def get_transaction_service(
    transaction_repo: TransactionRepository = Depends(get_transaction_repository),
) -> TransactionService:
    return TransactionService(transaction_repo)


async def get_current_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Verify the bearer token and return its claims.

    Args:
        request: Incoming request (identity is attached for request logging)
        credentials: HTTP bearer token credentials, if any
        token_service: Token verifier

    Returns:
        Verified token claims

    Raises:
        UnauthenticatedError: If the header is missing or the token fails any check
    """
    if credentials is None:
        raise UnauthenticatedError(details={"reason": "missing bearer token"})

    claims = token_service.verify(credentials.credentials)
    if claims is None:
        raise UnauthenticatedError(details={"reason": "invalid token"})

    request.state.user_id = str(claims.user_id)
    return claims


CurrentIdentity = Annotated[TokenClaims, Depends(get_current_identity)]
