# =============================================================================
# core/services/auth_service.py - Account Business Logic
# =============================================================================
# Wraps Supabase Auth for registration, password sign-in, sign-out and
# password changes. Sign-in/sign-up run on a throwaway anon-key client;
# session revocation and password changes use the admin API.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import validate_email_domain
from app.config import settings
from app.auth.models import AuthSession, LoginRequest, RegisterRequest
from app.exceptions import (
    InvalidCredentialsError,
    InvalidEmailDomainError,
    RegistrationError,
)
from core.models.user import ProfileCreate
from core.services.academic_service import AcademicService
from core.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


def _session_from_response(response: Any) -> AuthSession | None:
    """Convert a supabase AuthResponse into our session model."""
    session = getattr(response, "session", None)
    user = getattr(response, "user", None)
    if session is None or user is None:
        return None
    return AuthSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        token_type=session.token_type or "bearer",
        user_id=user.id,
        email=user.email,
    )


class AuthService:
    """Registration and session management."""

    @staticmethod
    def register(request: RegisterRequest) -> dict[str, Any]:
        """
        Create an auth account and its profile row.

        Returns:
            {"user_id", "session"} - session is None while email confirmation
            is pending

        Raises:
            InvalidEmailDomainError: Email malformed or from an unlisted domain
            InvalidAcademicSelectionError: Unknown year/branch/semester code
            RegistrationError: Auth provider refused the sign-up
        """
        ok, reason = validate_email_domain(request.email, settings.allowed_email_domains_list)
        if not ok:
            raise InvalidEmailDomainError(request.email, reason)

        year = AcademicService.normalize_code("year", request.year)
        branch = AcademicService.normalize_code("branch", request.branch)
        semester = AcademicService.normalize_code("semester", request.semester)

        client = SupabaseClient.create_anon_client()

        try:
            response = client.auth.sign_up({
                "email": request.email,
                "password": request.password,
                "options": {"data": {"name": request.name}},
            })
        except Exception as e:
            logger.warning(f"Sign-up failed for {request.email}: {e}")
            raise RegistrationError(str(e))

        if response.user is None:
            raise RegistrationError("No user returned")

        ProfileService.create_profile(ProfileCreate(
            id=response.user.id,
            name=request.name,
            email=request.email,
            college=request.college,
            branch=branch,
            year=year,
            semester=semester,
        ))

        logger.info(f"Registered user: {response.user.id}")
        return {
            "user_id": str(response.user.id),
            "session": _session_from_response(response),
        }

    @staticmethod
    def login(request: LoginRequest) -> AuthSession:
        """
        Password sign-in.

        Raises:
            InvalidCredentialsError: On any sign-in failure
        """
        client = SupabaseClient.create_anon_client()

        try:
            response = client.auth.sign_in_with_password({
                "email": request.email,
                "password": request.password,
            })
        except Exception as e:
            logger.info(f"Login failed for {request.email}: {e}")
            raise InvalidCredentialsError()

        session = _session_from_response(response)
        if session is None:
            raise InvalidCredentialsError()

        logger.info(f"User logged in: {session.user_id}")
        return session

    @staticmethod
    def logout(access_token: str) -> None:
        """Revoke all refresh tokens of the token's user."""
        client = SupabaseClient.get_client()
        try:
            client.auth.admin.sign_out(access_token)
        except Exception as e:
            # Token may already be expired or revoked
            logger.warning(f"Sign-out failed: {e}")

    @staticmethod
    def change_password(user_id: UUID | str, new_password: str) -> None:
        """Set a new password via the admin API."""
        client = SupabaseClient.get_client()
        try:
            client.auth.admin.update_user_by_id(str(user_id), {"password": new_password})
            logger.info(f"Password changed for user: {user_id}")
        except Exception as e:
            logger.error(f"Failed to change password: {e}")
            raise
