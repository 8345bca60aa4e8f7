# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - sheets_client.py: Google Sheets catalog reader (alternate content source)
# - github_client.py: Repository contributors listing
# - cache.py: Time-based in-process cache
# - utils.py: Shared utilities (error handling, UUID normalization, email checks)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.cache import TTLCache
from lib.utils import ApplicationError, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Cache
    "TTLCache",
    # Utils
    "ApplicationError",
    "normalize_uuid",
]
