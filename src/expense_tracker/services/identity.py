"""Identity service: registration, login and profile lookup."""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from expense_tracker.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthenticatedError,
)
from expense_tracker.core.security import TokenService, hash_password, verify_password
from expense_tracker.models.user import DEFAULT_ROLE, User
from expense_tracker.repositories.user import UserRepository
from expense_tracker.schemas.auth import AuthResult, UserSummary

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Emails match case-insensitively; they are stored lowercased."""
    return email.strip().lower()


class IdentityService:
    """Service for authentication operations."""

    def __init__(self, user_repo: UserRepository, token_service: TokenService):
        """
        Initialize identity service.

        Args:
            user_repo: User repository for database operations
            token_service: Issues tokens for authenticated users
        """
        self.user_repo = user_repo
        self.token_service = token_service

    def _auth_result(self, user: User) -> AuthResult:
        token = self.token_service.issue(user.id, user.email, user.role)
        return AuthResult(token=token, user=UserSummary.model_validate(user))

    async def register(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> AuthResult:
        """
        Register a new user and sign them in.

        Args:
            email: User email address
            password: Plain text password
            first_name: Given name
            last_name: Family name

        Returns:
            Token and public user fields

        Raises:
            DuplicateEmailError: If email already exists
        """
        email = normalize_email(email)
        if await self.user_repo.email_exists(email):
            raise DuplicateEmailError()

        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=DEFAULT_ROLE,
        )

        try:
            created_user = await self.user_repo.create(user)
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email.
            await self.user_repo.db.rollback()
            raise DuplicateEmailError()

        logger.info("User registered", extra={"user_id": str(created_user.id)})
        return self._auth_result(created_user)

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate user and return a token.

        Args:
            email: User email address
            password: Plain text password

        Returns:
            Token and public user fields

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        user = await self.user_repo.get_by_email(normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login failed")
            raise InvalidCredentialsError()

        logger.info("User logged in", extra={"user_id": str(user.id)})
        return self._auth_result(user)

    async def get_profile(self, user_id: UUID | None) -> UserSummary:
        """
        Get public profile for the authenticated user.

        Raises:
            UnauthenticatedError: If no identity is attached
            NotFoundError: If the user record no longer exists
        """
        if user_id is None:
            raise UnauthenticatedError()

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(details={"user_id": str(user_id)})
        return UserSummary.model_validate(user)
