# =============================================================================
# core/services/admin_service.py - Admin Review Business Logic
# =============================================================================
# Item verification workflow and user management for admins.
#
# Status changes are performed by database functions:
#   approve_marketplace_item(item_id, admin_notes_text)
#   reject_marketplace_item(item_id, reason, admin_notes_text)
# which also stamp verified_by/verified_at. Only pending items may be
# approved or rejected; that guard is checked here before the call.
# =============================================================================

import logging
from typing import Any, Callable, Literal
from uuid import UUID

from lib.supabase_client import ADMIN_ITEM_SELECT, ITEM_SELECT, SupabaseClient
from app.exceptions import (
    InvalidVerificationTransitionError,
    ItemNotFoundError,
    LearnConnectException,
    ProfileNotFoundError,
    RejectionReasonRequiredError,
)
from core.models.marketplace import VerificationStatus
from core.services.marketplace_service import ITEMS_TABLE, invalidate_marketplace_cache
from core.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

BULK_REJECTION_REASON = "Bulk rejection"
RECENT_ITEMS_LIMIT = 5

# (done, total, item_id) after every bulk item
ProgressCallback = Callable[[int, int, str], None]


class AdminService:
    """
    Service for admin-only operations.

    Callers are expected to have passed require_admin.
    """

    # -------------------------------------------------------------------------
    # Review queue
    # -------------------------------------------------------------------------

    @staticmethod
    def get_all_items() -> list[dict[str, Any]]:
        """Every item in any state, newest first, with seller, category and reviewer."""
        client = SupabaseClient.get_client()
        response = (
            client.table(ITEMS_TABLE)
            .select(ADMIN_ITEM_SELECT)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    @staticmethod
    def get_items_by_status(status: VerificationStatus) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = (
            client.table(ITEMS_TABLE)
            .select(ADMIN_ITEM_SELECT)
            .eq("verification_status", VerificationStatus(status).value)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    @staticmethod
    def get_pending_items() -> list[dict[str, Any]]:
        return AdminService.get_items_by_status(VerificationStatus.PENDING)

    @staticmethod
    def search_items(term: str, status: str = "all") -> list[dict[str, Any]]:
        """
        Search titles and descriptions, optionally within one status.

        Args:
            term: Case-insensitive substring; empty matches everything
            status: A verification status or "all"
        """
        client = SupabaseClient.get_client()
        query = client.table(ITEMS_TABLE).select(ADMIN_ITEM_SELECT)

        if status and status != "all":
            query = query.eq("verification_status", VerificationStatus(status).value)
        if term:
            query = query.or_(f"title.ilike.%{term}%,description.ilike.%{term}%")

        response = query.order("created_at", desc=True).execute()
        return response.data or []

    @staticmethod
    def get_admin_stats() -> dict[str, Any]:
        """Counts by verification status, total users and the latest items."""
        client = SupabaseClient.get_client()

        statuses = (
            client.table(ITEMS_TABLE)
            .select("verification_status")
            .execute()
        ).data or []

        users = (
            client.table("users")
            .select("*", count="exact", head=True)
            .execute()
        )

        recent = (
            client.table(ITEMS_TABLE)
            .select(ITEM_SELECT)
            .order("created_at", desc=True)
            .limit(RECENT_ITEMS_LIMIT)
            .execute()
        ).data or []

        def count(status: VerificationStatus) -> int:
            return sum(1 for row in statuses if row.get("verification_status") == status.value)

        return {
            "total_items": len(statuses),
            "pending_items": count(VerificationStatus.PENDING),
            "approved_items": count(VerificationStatus.APPROVED),
            "rejected_items": count(VerificationStatus.REJECTED),
            "total_users": users.count or 0,
            "recent_items": recent,
        }

    # -------------------------------------------------------------------------
    # Verification
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_pending(item_id: str, action: str) -> None:
        item = SupabaseClient.fetch_item(item_id, select="id, verification_status")
        if not item:
            raise ItemNotFoundError(item_id)

        current = item.get("verification_status") or VerificationStatus.PENDING.value
        if current != VerificationStatus.PENDING.value:
            raise InvalidVerificationTransitionError(item_id, current, action)

    @staticmethod
    def approve_item(item_id: UUID | str, admin_notes: str | None = None) -> None:
        """
        Approve a pending item, making it visible to buyers.

        Raises:
            ItemNotFoundError: Unknown item
            InvalidVerificationTransitionError: Item is not pending
        """
        item_id_str = str(item_id)
        AdminService._require_pending(item_id_str, "approve")

        SupabaseClient.call_rpc("approve_marketplace_item", {
            "item_id": item_id_str,
            "admin_notes_text": admin_notes or None,
        })

        invalidate_marketplace_cache()
        logger.info(f"Approved item {item_id_str}")

    @staticmethod
    def reject_item(
        item_id: UUID | str,
        reason: str,
        admin_notes: str | None = None,
    ) -> None:
        """
        Reject a pending item with a reason shown to the seller.

        Raises:
            RejectionReasonRequiredError: Blank reason
            ItemNotFoundError: Unknown item
            InvalidVerificationTransitionError: Item is not pending
        """
        item_id_str = str(item_id)
        if not reason or not reason.strip():
            raise RejectionReasonRequiredError(item_id_str)

        AdminService._require_pending(item_id_str, "reject")

        SupabaseClient.call_rpc("reject_marketplace_item", {
            "item_id": item_id_str,
            "reason": reason.strip(),
            "admin_notes_text": admin_notes or None,
        })

        invalidate_marketplace_cache()
        logger.info(f"Rejected item {item_id_str}: {reason.strip()}")

    @staticmethod
    def perform_bulk_action(
        item_ids: list[UUID | str],
        action: Literal["approve", "reject"],
        reason: str | None = None,
        admin_notes: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> dict[str, Any]:
        """
        Apply one action to many items, continuing past failures.

        Returns:
            {"action", "total", "succeeded": [ids], "failed": [{item_id, code, error}]}
        """
        succeeded: list[str] = []
        failed: list[dict[str, str]] = []
        total = len(item_ids)

        for index, item_id in enumerate(item_ids, start=1):
            item_id_str = str(item_id)
            try:
                if action == "approve":
                    AdminService.approve_item(item_id_str, admin_notes)
                else:
                    AdminService.reject_item(
                        item_id_str,
                        reason or BULK_REJECTION_REASON,
                        admin_notes,
                    )
                succeeded.append(item_id_str)

            except LearnConnectException as e:
                logger.warning(f"Bulk {action} skipped {item_id_str}: {e.message}")
                failed.append({"item_id": item_id_str, "code": e.code, "error": e.message})
            except Exception as e:
                logger.error(f"Bulk {action} failed for {item_id_str}: {e}")
                failed.append({"item_id": item_id_str, "code": "UNEXPECTED_ERROR", "error": str(e)})

            if on_progress:
                on_progress(index, total, item_id_str)

        logger.info(f"Bulk {action}: {len(succeeded)} succeeded, {len(failed)} failed")
        return {
            "action": action,
            "total": total,
            "succeeded": succeeded,
            "failed": failed,
        }

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    @staticmethod
    def get_all_users() -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = (
            client.table("users")
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    @staticmethod
    def _set_admin_flag(user_id: UUID | str, is_admin: bool) -> dict[str, Any]:
        user_id_str = str(user_id)
        client = SupabaseClient.get_client()
        response = (
            client.table("users")
            .update({"is_admin": is_admin})
            .eq("id", user_id_str)
            .execute()
        )
        if not response.data:
            raise ProfileNotFoundError(user_id_str)

        logger.info(f"User {user_id_str} is_admin -> {is_admin}")
        return response.data[0]

    @staticmethod
    def make_user_admin(user_id: UUID | str) -> dict[str, Any]:
        return AdminService._set_admin_flag(user_id, True)

    @staticmethod
    def remove_admin_privileges(user_id: UUID | str) -> dict[str, Any]:
        return AdminService._set_admin_flag(user_id, False)

    @staticmethod
    def is_admin(user_id: UUID | str) -> bool:
        return ProfileService.is_admin(user_id)
