# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for registration, sign-in/out and the current user's profile.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_access_token, get_current_user
from app.auth.models import (
    AuthSession,
    AuthUser,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    RegisterResponse,
)
from core.models.user import ProfileUpdate, UserProfile
from core.services.auth_service import AuthService
from core.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(request: RegisterRequest) -> RegisterResponse:
    """
    Register a new student account.

    Creates the auth identity and the public profile. If email confirmation
    is enabled on the project, no session is returned until the user
    confirms.

    Raises:
        400: Email domain not allowed, unknown academic code, or sign-up refused
    """
    result = AuthService.register(request)
    return RegisterResponse(**result)


@router.post("/login", response_model=AuthSession)
async def login(request: LoginRequest) -> AuthSession:
    """
    Sign in with email and password.

    Raises:
        401: Invalid credentials
    """
    return AuthService.login(request)


@router.post("/logout")
async def logout(token: str = Depends(get_access_token)) -> dict:
    """Revoke the current session."""
    AuthService.logout(token)
    return {"message": "Signed out"}


@router.get("/me", response_model=UserProfile)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserProfile:
    """
    Get the current authenticated user's profile.

    Creates a minimal profile if the account has none yet.

    Raises:
        401: If not authenticated
    """
    profile = ProfileService.ensure_profile(user.id, user.email)
    return UserProfile(**profile)


@router.patch("/me", response_model=UserProfile)
async def update_current_user(
    updates: ProfileUpdate,
    user: AuthUser = Depends(get_current_user),
) -> UserProfile:
    """Update the current user's profile fields."""
    profile = ProfileService.update_profile(user.id, updates)
    return UserProfile(**profile)


@router.post("/password")
async def change_password(
    request: PasswordChangeRequest,
    user: AuthUser = Depends(get_current_user),
) -> dict:
    """Change the current user's password."""
    AuthService.change_password(user.id, request.new_password)
    return {"message": "Password updated"}


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
