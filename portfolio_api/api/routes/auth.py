"""
Authentication endpoints.
"""

from fastapi import APIRouter, status

from portfolio_api.api.deps import CurrentUser, Identity
from portfolio_api.logging_config import get_logger
from portfolio_api.schemas.auth import (
    RegisterResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from portfolio_api.schemas.common import SuccessResponse

router = APIRouter()
logger = get_logger(__name__)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, identity: Identity):
    """
    Register a new user account.

    Username and email must both be unused; the password is stored hashed.
    """
    user = await identity.register_user(
        username=data.username,
        email=data.email,
        password=data.password,
    )
    return RegisterResponse(user_id=user.id, user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(data: UserLogin, identity: Identity):
    """
    Authenticate user and return an access token.
    """
    user, token = await identity.authenticate(data.username, data.password)
    return TokenResponse(
        access_token=token.access_token,
        token_type=token.token_type,
        expires_in=token.expires_in,
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=SuccessResponse)
async def logout(current_user: CurrentUser):
    """
    Log out the current user.

    Tokens are stateless; the client discards its copy.
    """
    logger.info("User logged out", extra={"user_id": str(current_user.id)})
    return SuccessResponse(message="Logged out successfully.")


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(current_user: CurrentUser):
    """Get current user's profile."""
    return UserResponse.model_validate(current_user)
