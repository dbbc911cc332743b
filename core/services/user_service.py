# =============================================================================
# core/services/user_service.py - Profiles and Roles
# =============================================================================

import logging
from collections import defaultdict
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid
from core.models.user import AppRole
from app.exceptions import SelfBlockError, UserNotFoundError

logger = logging.getLogger(__name__)


class UserService:
    """Service for profiles, roles and blocking."""

    @staticmethod
    def get_roles(user_id: UUID | str) -> list[str]:
        return SupabaseClient.fetch_roles(user_id)

    @staticmethod
    def is_admin(user_id: UUID | str) -> bool:
        return SupabaseClient.has_role(user_id, AppRole.ADMIN.value)

    @staticmethod
    def get_profile(user_id: UUID | str) -> dict[str, Any]:
        """
        Get a profile with its roles.

        Raises:
            UserNotFoundError: If no profile exists for this account
        """
        user_id_str = normalize_uuid(user_id)
        profile = SupabaseClient.fetch_profile(user_id_str)
        if not profile:
            raise UserNotFoundError(user_id_str)

        profile["roles"] = UserService.get_roles(user_id_str)
        return profile

    @staticmethod
    def is_blocked(user_id: UUID | str) -> bool:
        """True when the account's profile is flagged blocked."""
        profile = SupabaseClient.fetch_profile(user_id)
        return bool(profile and profile.get("is_blocked"))

    @staticmethod
    def list_users() -> list[dict[str, Any]]:
        """All profiles, newest first, each with its roles."""
        client = SupabaseClient.get_client()

        try:
            profiles = (
                client.table("profiles")
                .select("*")
                .order("created_at", desc=True)
                .execute()
            ).data or []
            role_rows = client.table("user_roles").select("user_id, role").execute().data or []

        except Exception as e:
            logger.error(f"Failed to list users: {e}")
            raise

        roles: dict[str, list[str]] = defaultdict(list)
        for row in role_rows:
            roles[str(row["user_id"])].append(row["role"])

        for profile in profiles:
            profile["roles"] = roles.get(str(profile["id"]), [])
        return profiles

    @staticmethod
    def set_blocked(actor_id: UUID | str, user_id: UUID | str, is_blocked: bool) -> dict[str, Any]:
        """
        Block or unblock an account.

        Raises:
            SelfBlockError: If an admin tries to block themselves
            UserNotFoundError: If the profile doesn't exist
        """
        user_id_str = normalize_uuid(user_id)
        if is_blocked and str(actor_id) == str(user_id_str):
            raise SelfBlockError()

        profile = SupabaseClient.fetch_profile(user_id_str)
        if not profile:
            raise UserNotFoundError(user_id_str)

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("profiles")
                .update({"is_blocked": is_blocked})
                .eq("id", user_id_str)
                .execute()
            )
            logger.info(f"User {user_id_str} {'blocked' if is_blocked else 'unblocked'} by {actor_id}")
            return response.data[0] if response.data else {**profile, "is_blocked": is_blocked}

        except Exception as e:
            logger.error(f"Failed to update block status for {user_id_str}: {e}")
            raise
