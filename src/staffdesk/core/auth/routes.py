"""Authentication API routes.

Provides endpoints for:
- Login (access token issuance)
- The current user's profile and abilities
"""

import structlog
from fastapi import APIRouter

from staffdesk.core.auth.dependencies import CurrentUser
from staffdesk.core.auth.schemas import AccessToken, LoginRequest
from staffdesk.core.auth.service import AuthSvc
from staffdesk.core.permissions.gate import GateDep
from staffdesk.modules.users.schemas import CurrentUserResponse, UserResponse


logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=AccessToken,
    summary="Login with email and password",
    description="Authenticate with email and password to receive an access token.",
)
async def login(data: LoginRequest, service: AuthSvc) -> AccessToken:
    """Login with email and password."""
    user, token = await service.login(email=data.email, password=data.password)
    logger.info("user_logged_in", user_id=user.id)
    return token


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current user",
    description="Returns the authenticated user's profile and core abilities.",
)
async def get_me(current_user: CurrentUser, gate: GateDep) -> CurrentUserResponse:
    """Get current user profile."""
    profile = UserResponse.model_validate(current_user)
    return CurrentUserResponse(
        **profile.model_dump(),
        abilities=await gate.abilities(current_user),
    )
