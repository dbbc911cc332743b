# =============================================================================
# core/models/user.py - Profile and Role Schemas
# =============================================================================
# Profiles mirror Supabase Auth users (one row per account). Roles live in
# user_roles; an account without rows is a regular user.
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AppRole(str, Enum):
    """Roles an account can hold."""
    ADMIN = "admin"
    USER = "user"


class ProfileResponse(BaseModel):
    """A profile row plus its roles."""
    model_config = ConfigDict(extra="ignore")

    id: UUID
    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    is_blocked: bool | None = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    roles: list[AppRole] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return AppRole.ADMIN in self.roles


class BlockUpdate(BaseModel):
    """Admin toggle for blocking an account."""

    is_blocked: bool
