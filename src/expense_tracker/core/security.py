"""Security utilities for password hashing and JWT token management."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from expense_tracker.config import Settings

logger = logging.getLogger(__name__)

# Password hashing with Argon2 (salted, memory-hard)
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Malformed or unrecognised hashes count as a mismatch.

    Args:
        plain_password: Password to verify
        hashed_password: Stored password hash

    Returns:
        True if password matches, False otherwise
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Password verification against malformed hash")
        return False


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified access token."""

    user_id: UUID
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and verifies signed, time-bound identity tokens.

    Tokens are stateless; there is no revocation before natural expiry.
    """

    def __init__(
        self,
        secret: str,
        issuer: str,
        audience: str,
        expire_minutes: int,
        algorithm: str = "HS256",
    ):
        self._secret = secret
        self.issuer = issuer
        self.audience = audience
        self.expire_delta = timedelta(minutes=expire_minutes)
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            expire_minutes=settings.jwt_expire_minutes,
            algorithm=settings.jwt_algorithm,
        )

    def issue(
        self,
        user_id: UUID,
        email: str,
        role: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """
        Create a signed JWT for a user.

        Args:
            user_id: User ID, stored in the ``sub`` claim
            email: User email
            role: User role tag
            expires_delta: Optional custom lifetime (may be negative in tests)

        Returns:
            Encoded JWT token string
        """
        issued_at = datetime.now(timezone.utc)
        expire = issued_at + (expires_delta if expires_delta is not None else self.expire_delta)
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "iat": issued_at,
            "exp": expire,
            "iss": self.issuer,
            "aud": self.audience,
        }
        return jwt.encode(to_encode, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Decode a token, checking signature, issuer, audience and expiry.

        Raises:
            JWTError: If any check fails
        """
        return jwt.decode(
            token,
            self._secret,
            algorithms=[self.algorithm],
            audience=self.audience,
            issuer=self.issuer,
            options={"require_exp": True, "require_iat": True, "require_sub": True},
        )

    def verify(self, token: str) -> TokenClaims | None:
        """
        Verify a token and extract its claims.

        Args:
            token: JWT token string

        Returns:
            Claims when every check passes, otherwise None
        """
        try:
            payload = self.decode(token)
            return TokenClaims(
                user_id=UUID(payload["sub"]),
                email=payload["email"],
                role=payload["role"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except JWTError as exc:
            logger.info("Rejected token", extra={"error_type": type(exc).__name__})
            return None
        except (KeyError, ValueError, TypeError) as exc:
            logger.info("Rejected token with bad claims", extra={"error_type": type(exc).__name__})
            return None
