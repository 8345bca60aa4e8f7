# =============================================================================
# core/services/profile_service.py - User Profile Business Logic
# =============================================================================
# Reads and writes public.users. A profile row is normally created at
# registration, but may be missing (e.g. accounts created before the trigger
# existed), so ensure_profile() repairs it on first use.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from core.models.user import ProfileCreate, ProfileUpdate
from core.services.academic_service import AcademicService
from app.exceptions import ProfileNotFoundError

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Service for user profile operations.

    Provides a clean interface between API routes and the users table.
    """

    @staticmethod
    def get_profile(user_id: UUID | str) -> dict[str, Any]:
        """
        Get a user's profile row.

        Raises:
            ProfileNotFoundError: If the user has no profile
        """
        profile = SupabaseClient.fetch_user_profile(user_id)
        if not profile:
            raise ProfileNotFoundError(str(user_id))
        return profile

    @staticmethod
    def create_profile(data: ProfileCreate) -> dict[str, Any]:
        """
        Insert a new profile row with default flags.

        Returns:
            The inserted row
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("users")
                .insert(data.to_row())
                .execute()
            )

            if response.data:
                logger.info(f"Created profile for user: {data.id}")
                return response.data[0]

            raise SupabaseClientError("Insert returned no data", code="INSERT_NO_DATA")

        except SupabaseClientError:
            raise
        except Exception as e:
            logger.error(f"Error creating user profile: {e}")
            raise

    @staticmethod
    def ensure_profile(user_id: UUID | str, email: str | None) -> dict[str, Any]:
        """
        Return the user's profile, creating a minimal one if missing.

        Lookup order:
        1. get_user_profile_safe RPC (creates the row server-side if it can)
        2. Direct select on users
        3. Insert a minimal profile named after the email local part
        """
        user_id_str = str(user_id)

        try:
            rows = SupabaseClient.call_rpc("get_user_profile_safe", {"user_id": user_id_str})
            if rows:
                return rows[0] if isinstance(rows, list) else rows
        except SupabaseClientError as e:
            logger.warning(f"get_user_profile_safe failed, falling back to direct query: {e}")

        profile = SupabaseClient.fetch_user_profile(user_id_str)
        if profile:
            return profile

        email = email or ""
        minimal = ProfileCreate(
            id=user_id_str,
            name=email.split("@")[0] or "Student",
            email=email,
        )
        ProfileService.create_profile(minimal)
        return ProfileService.get_profile(user_id_str)

    @staticmethod
    def update_profile(user_id: UUID | str, updates: ProfileUpdate) -> dict[str, Any]:
        """
        Update editable profile fields.

        Academic codes (year/branch/semester) are validated and lower-cased.

        Raises:
            ProfileNotFoundError: If the user has no profile
            InvalidAcademicSelectionError: If an academic code is unknown
        """
        current = ProfileService.get_profile(user_id)

        update_data = updates.model_dump(exclude_none=True)
        for field in ("year", "branch", "semester"):
            if field in update_data:
                update_data[field] = AcademicService.normalize_code(field, update_data[field])

        if not update_data:
            return current

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("users")
                .update(update_data)
                .eq("id", str(user_id))
                .execute()
            )

            if response.data:
                logger.info(f"Updated profile: {user_id} ({', '.join(update_data)})")
                return response.data[0]

            return {**current, **update_data}

        except Exception as e:
            logger.error(f"Failed to update profile: {e}")
            raise

    @staticmethod
    def is_admin(user_id: UUID | str) -> bool:
        """Check the is_admin flag. Any lookup error counts as not admin."""
        try:
            profile = SupabaseClient.fetch_user_profile(user_id)
        except SupabaseClientError as e:
            logger.error(f"Error checking admin status: {e}")
            return False
        return bool(profile and profile.get("is_admin"))
