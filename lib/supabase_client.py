# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides the lookups that almost every service needs:
# - Single-row fetches by column (businesses, profiles, claims, ...)
# - Role checks against user_roles
# - Profile lookup by email (transfers)
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   business = SupabaseClient.fetch_business(business_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST error code for ".single()" with zero rows
NOT_FOUND_CODE = "PGRST116"

# Postgres / PostgREST codes the API answers with something better than a 500.
# code -> (error code, HTTP status, suggestion)
DATABASE_ERRORS: dict[str, tuple[str, int, str]] = {
    "23505": (
        "DUPLICATE_VALUE",
        409,
        "A record with this value already exists; for listings pick a different slug",
    ),
    "23503": (
        "INVALID_REFERENCE",
        400,
        "Check that the referenced category, tag, amenity or user exists",
    ),
    "23502": (
        "MISSING_VALUE",
        400,
        "A required field was empty",
    ),
    "23514": (
        "CHECK_VIOLATION",
        400,
        "One of the values is outside the allowed range",
    ),
    NOT_FOUND_CODE: (
        "NOT_FOUND",
        404,
        "The requested record does not exist",
    ),
}


class SupabaseClientError(ApplicationError):
    """
    Error during Supabase operations.

    Carries a code and a suggestion so callers can surface an actionable
    message instead of a raw PostgREST error.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)
        self.status_code = status_code

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result

    @classmethod
    def from_api_error(cls, error: APIError) -> "SupabaseClientError":
        """
        Wrap a PostgREST APIError, mapping known Postgres codes.

        Example:
            23505 (unique_violation) -> DUPLICATE_VALUE, 409
        """
        pg_code = str(error.code) if error.code else None
        code, status_code, suggestion = DATABASE_ERRORS.get(
            pg_code, ("DATABASE_ERROR", 500, error.hint)
        )
        details = {"db_code": pg_code}
        if error.details:
            details["db_details"] = error.details
        return cls(
            message=error.message or "Database request failed",
            code=code,
            suggestion=suggestion,
            details=details,
            status_code=status_code,
        )


def is_not_found(error: Exception) -> bool:
    """Check whether a PostgREST error means "no rows"."""
    return NOT_FOUND_CODE in str(error)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        business = SupabaseClient.fetch_business("550e8400-...")
        if SupabaseClient.has_role(user_id, "admin"):
            ...
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Ownership and role checks are therefore done by the services.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Generic Lookups
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_one(
        cls,
        table: str,
        column: str,
        value: Any,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch the first row of `table` where `column` equals `value`.

        Args:
            table: Table name
            column: Column to filter on
            value: Value to match (UUIDs are converted to strings)
            columns: PostgREST select string, may include embeds

        Returns:
            Row dict, or None if no row matches

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        if isinstance(value, UUID):
            value = str(value)

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq(column, value)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            if is_not_found(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_FAILED",
                details={"table": table, column: value}
            )

    # -------------------------------------------------------------------------
    # Business / Profile Lookups
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_business(cls, business_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a business row (no embeds) by ID."""
        return cls.fetch_one("businesses", "id", cls._normalize_uuid(business_id))

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a profile row by user ID."""
        return cls.fetch_one("profiles", "id", cls._normalize_uuid(user_id))

    @classmethod
    def fetch_profile_by_email(cls, email: str) -> dict[str, Any] | None:
        """
        Fetch a profile by email address.

        Emails are compared lowercased and trimmed; profiles store the
        address Supabase Auth registered.
        """
        return cls.fetch_one("profiles", "email", email.strip().lower())

    # -------------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_roles(cls, user_id: str | UUID) -> list[str]:
        """
        Fetch all roles assigned to a user.

        Returns:
            List of role names (e.g. ["admin"]); empty for regular users

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("user_roles")
                .select("role")
                .eq("user_id", user_id_str)
                .execute()
            )
            return [row["role"] for row in (response.data or [])]

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch roles: {e}",
                code="FETCH_ROLES_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def has_role(cls, user_id: str | UUID, role: str) -> bool:
        """Check whether a user holds `role`."""
        return role in cls.fetch_roles(user_id)

    # -------------------------------------------------------------------------
    # Counting
    # -------------------------------------------------------------------------

    @classmethod
    def count_rows(cls, table: str, filters: dict[str, Any] | None = None) -> int:
        """
        Count rows in `table` matching equality `filters`.

        Example:
            SupabaseClient.count_rows("businesses", {"status": "pending"})

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            query = client.table(table).select("id", count="exact")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            response = query.limit(1).execute()
            return response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count {table}: {e}",
                code="COUNT_FAILED",
                details={"table": table}
            )
