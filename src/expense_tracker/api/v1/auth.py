"""Authentication endpoints for registration, login and profile."""

from fastapi import APIRouter, Depends, status

from expense_tracker.api.deps import CurrentIdentity, get_identity_service
from expense_tracker.schemas.auth import AuthResult, LoginRequest, UserRegister, UserSummary
from expense_tracker.services.identity import IdentityService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=AuthResult,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a new user account and return an access token.",
)
async def register(
    data: UserRegister,
    identity_service: IdentityService = Depends(get_identity_service),
) -> AuthResult:
    """
    Register a new user account.

    Raises:
        400: Email already registered or validation error
    """
    return await identity_service.register(
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
    )


@router.post(
    "/login",
    response_model=AuthResult,
    summary="User login",
    description="Authenticate with email and password to receive a JWT.",
)
async def login(
    data: LoginRequest,
    identity_service: IdentityService = Depends(get_identity_service),
) -> AuthResult:
    """
    Authenticate user and return a token.

    Raises:
        401: Invalid credentials
    """
    return await identity_service.login(email=data.email, password=data.password)


@router.get(
    "/profile",
    response_model=UserSummary,
    summary="Get current user",
    description="Get the authenticated user's profile information.",
)
async def get_profile(
    identity: CurrentIdentity,
    identity_service: IdentityService = Depends(get_identity_service),
) -> UserSummary:
    """
    Get current authenticated user's profile.

    Raises:
        401: Invalid or missing authorization token
        404: User record no longer exists
    """
    return await identity_service.get_profile(identity.user_id)
