# =============================================================================
# app/auth/dependencies.py - Bearer Token Dependencies
# =============================================================================
# Turns the Authorization header into an AuthUser for route handlers.
#
# Supabase projects sign access tokens either with the legacy shared secret
# (HS256) or with asymmetric signing keys published as JWKS (ES256/RS256).
# The token header decides which path is taken.
#
# Usage:
#   from app.dependencies import CurrentUser, AdminUser
#
#   @router.get("/me")
#   async def me(user: CurrentUser):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Any, Optional
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser
from app.exceptions import AdminRequiredError
from core.services.profile_service import ProfileService
from lib.cache import TTLCache

logger = logging.getLogger(__name__)

bearer = HTTPBearer()
bearer_optional = HTTPBearer(auto_error=False)

AUDIENCE = "authenticated"
SHARED_SECRET_ALG = "HS256"

# Signing keys rotate rarely; refetch hourly
_jwks = TTLCache(ttl_seconds=3600)
_last_known_jwks: dict = {"keys": []}


# =============================================================================
# Key resolution
# =============================================================================

def _jwks_url() -> str:
    return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"


def _signing_keys() -> list[dict]:
    """Published signing keys. Falls back to the last good set if the fetch fails."""
    global _last_known_jwks

    cached = _jwks.get("jwks")
    if cached is not None:
        return cached.get("keys", [])

    try:
        response = httpx.get(_jwks_url(), timeout=settings.HTTP_TIMEOUT_SECONDS)
        response.raise_for_status()
        document = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"JWKS fetch failed, using {len(_last_known_jwks['keys'])} known keys: {e}")
        return _last_known_jwks["keys"]

    _jwks.set("jwks", document)
    _last_known_jwks = document
    return document.get("keys", [])


def _verification_key(token: str) -> tuple[Any, str]:
    """(key, algorithm) to verify this token with."""
    shared = (settings.SUPABASE_JWT_SECRET, SHARED_SECRET_ALG)

    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        # Let jwt.decode report the malformed token
        return shared

    alg = header.get("alg", SHARED_SECRET_ALG)
    kid = header.get("kid")
    if alg == SHARED_SECRET_ALG or not kid:
        return shared

    match = next((key for key in _signing_keys() if key.get("kid") == kid), None)
    if match is None:
        logger.warning(f"No published key with kid={kid} ({alg}); trying shared secret")
        return shared
    return match, alg


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# =============================================================================
# Token decoding
# =============================================================================

def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and build the AuthUser from its claims.

    Raises:
        HTTPException: 401 when the signature, expiry, audience or sub is bad
    """
    key, algorithm = _verification_key(token)

    try:
        claims = jwt.decode(token, key, algorithms=[algorithm], audience=AUDIENCE)
    except ExpiredSignatureError:
        logger.info("Rejected expired access token")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"Rejected access token: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    subject = claims.get("sub")
    if not subject:
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_id = UUID(subject)
    except ValueError:
        logger.warning(f"Token sub is not a UUID: {subject}")
        raise _unauthorized("Invalid token: malformed user ID")

    return AuthUser(id=user_id, email=claims.get("email"))


# =============================================================================
# Dependencies
# =============================================================================

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer)
) -> AuthUser:
    return decode_access_token(credentials.credentials)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_optional)
) -> Optional[AuthUser]:
    """Anonymous callers, and callers with a bad token, get None."""
    if credentials is None:
        return None
    try:
        return decode_access_token(credentials.credentials)
    except HTTPException:
        return None


async def get_access_token(
    credentials: HTTPAuthorizationCredentials = Depends(bearer)
) -> str:
    """Raw bearer token, for endpoints that pass it back to Supabase Auth."""
    return credentials.credentials


async def require_admin(
    user: AuthUser = Depends(get_current_user)
) -> AuthUser:
    """
    Pass only users whose profile has is_admin set.

    Raises:
        AdminRequiredError: 403 for everyone else
    """
    if not ProfileService.is_admin(user.id):
        logger.warning(f"Non-admin {user.id} attempted an admin action")
        raise AdminRequiredError(str(user.id))
    return user
