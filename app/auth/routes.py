# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes are for getting user info after authentication.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from app.exceptions import UserNotFoundError
from core.models.user import AppRole
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user's profile and roles.

    Returns:
        UserResponse: Profile with id, email, full_name, roles, etc.

    Raises:
        401: If not authenticated
    """
    try:
        profile = UserService.get_profile(user.id)
        return UserResponse(
            **profile,
            is_admin=AppRole.ADMIN.value in profile["roles"],
        )

    except UserNotFoundError:
        # User exists in auth but not yet in public.profiles
        # (might happen if the signup trigger hasn't run yet)
        logger.warning(f"No profile row yet for user: {user.id}")

    roles = UserService.get_roles(user.id)
    return UserResponse(
        id=user.id,
        email=user.email,
        roles=roles,
        is_admin=AppRole.ADMIN.value in roles,
    )


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Returns:
        dict: Confirmation with user_id

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
