# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth.
#
# Usage:
#   from app.auth import get_current_user, get_active_user, get_current_admin, AuthUser
#
#   @router.post("/businesses")
#   async def create(user: AuthUser = Depends(get_active_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import (
    get_active_user,
    get_current_admin,
    get_current_user,
    get_current_user_optional,
)
from app.auth.models import AuthUser, UserResponse

__all__ = [
    "get_active_user",
    "get_current_admin",
    "get_current_user",
    "get_current_user_optional",
    "AuthUser",
    "UserResponse",
]
