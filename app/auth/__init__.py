# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Supabase Auth sign-in and the bearer token dependencies. Route handlers
# normally use the aliases in app.dependencies instead of these directly.
# =============================================================================

from app.auth.dependencies import (
    get_access_token,
    get_current_user,
    get_current_user_optional,
    require_admin,
)
from app.auth.models import AuthUser

__all__ = [
    "get_access_token",
    "get_current_user",
    "get_current_user_optional",
    "require_admin",
    "AuthUser",
]
