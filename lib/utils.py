# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        business_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        business_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def is_uuid(value: str) -> bool:
    """
    Check whether a path key looks like a UUID.

    Listing URLs accept either an id or a slug, so lookups branch on this.
    """
    return bool(UUID_PATTERN.match(value or ""))


# =============================================================================
# Text Utilities
# =============================================================================

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """
    Build a URL slug from a display name.

    Lowercases, collapses every run of non-alphanumerics into one hyphen
    and trims hyphens from both ends.

    Example:
        slugify("Free Wi-Fi!")  # "free-wi-fi"
    """
    return _NON_ALNUM.sub("-", name.lower()).strip("-")


def empty_to_none(data: dict[str, Any]) -> dict[str, Any]:
    """Replace blank strings with None so optional columns store NULL."""
    return {
        key: (None if isinstance(value, str) and not value.strip() else value)
        for key, value in data.items()
    }


def escape_xml(text: str | None) -> str:
    """Escape the five XML special characters."""
    if not text:
        return ""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


# =============================================================================
# Date Utilities
# =============================================================================

def to_w3c_date(value: str | datetime | None) -> str:
    """
    Format a timestamp as a W3C date (YYYY-MM-DD).

    Missing or unparseable values fall back to today (UTC).
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
        except ValueError:
            pass
    return today_utc().isoformat()


def today_utc() -> date:
    """Current date in UTC."""
    return datetime.now(timezone.utc).date()


def utc_now_iso() -> str:
    """Current UTC timestamp in ISO-8601 format."""
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages: errors should tell HOW to fix,
    not just WHAT failed.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
