# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase singleton and small typed query helpers
# - utils.py: Shared utilities (UUID/slug helpers, XML escaping, dates)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import ApplicationError, is_uuid, normalize_uuid, slugify

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "ApplicationError",
    "is_uuid",
    "normalize_uuid",
    "slugify",
]
