# =============================================================================
# app/dependencies.py - Route Parameter Aliases
# =============================================================================
# Annotated aliases so handlers declare what they need in the signature:
#
#   async def approve(item_id: UUID, admin: AdminUser, supabase: SupabaseDep)
# =============================================================================

from typing import Annotated, Optional

from fastapi import Depends

from app.auth import AuthUser, get_current_user, get_current_user_optional, require_admin
from lib.supabase_client import SupabaseClient


def get_supabase_client() -> type[SupabaseClient]:
    """The class itself; its clients are process-wide singletons."""
    return SupabaseClient


SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]

# Anyone with a valid token
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
# Anonymous allowed (marketplace browsing, view counting)
OptionalUser = Annotated[Optional[AuthUser], Depends(get_current_user_optional)]
# users.is_admin required
AdminUser = Annotated[AuthUser, Depends(require_admin)]
