# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict
from uuid import UUID
from datetime import datetime
from typing import Optional


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database. `is_admin` is filled in by the admin
    dependencies after a user_roles lookup.
    """
    model_config = ConfigDict(frozen=True)  # Make immutable

    id: UUID
    email: Optional[str] = None
    is_admin: bool = False


class UserResponse(BaseModel):
    """
    Full user response for /auth/me.

    Includes profile data from public.profiles and roles from user_roles.
    """
    model_config = ConfigDict(extra="ignore")

    id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    is_blocked: bool = False
    roles: list[str] = []
    is_admin: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
