# =============================================================================
# app/routers/admin.py - Admin Review Endpoints
# =============================================================================
# Item verification queue, bulk actions and admin role management.
# Every route requires users.is_admin.
# =============================================================================

import logging
from typing import Annotated, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query

from app.dependencies import AdminUser
from app.routers.tasks import TaskSubmitResponse
from core.models.marketplace import AdminStats, BulkActionRequest, VerificationAction, VerificationStatus
from core.models.user import UserProfile
from core.services.admin_service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter()

StatusFilter = Literal["all", "pending", "approved", "rejected"]


# =============================================================================
# Review queue
# =============================================================================

@router.get("/stats", response_model=AdminStats)
async def get_stats(admin: AdminUser):
    """Item counts by status, total users and the five newest items."""
    return AdminService.get_admin_stats()


@router.get("/items")
async def list_items(
    admin: AdminUser,
    status: Annotated[Optional[VerificationStatus], Query()] = None,
):
    """All items, or only those with the given verification status."""
    if status is None:
        return AdminService.get_all_items()
    return AdminService.get_items_by_status(status)


@router.get("/items/search")
async def search_items(
    admin: AdminUser,
    q: Annotated[str, Query(max_length=200)] = "",
    status: Annotated[StatusFilter, Query()] = "all",
):
    """Search titles and descriptions."""
    return AdminService.search_items(q, status)


@router.post("/items/{item_id}/approve")
async def approve_item(
    item_id: UUID,
    admin: AdminUser,
    action: Optional[VerificationAction] = None,
):
    """
    Approve a pending item.

    Raises:
        404: Item not found
        409: Item is not pending
    """
    notes = action.admin_notes if action else None
    AdminService.approve_item(item_id, notes)
    logger.info(f"Admin {admin.id} approved {item_id}")
    return {"id": str(item_id), "verification_status": VerificationStatus.APPROVED.value}


@router.post("/items/{item_id}/reject")
async def reject_item(item_id: UUID, action: VerificationAction, admin: AdminUser):
    """
    Reject a pending item with a reason.

    Raises:
        400: Missing reason
        404: Item not found
        409: Item is not pending
    """
    AdminService.reject_item(item_id, action.reason or "", action.admin_notes)
    logger.info(f"Admin {admin.id} rejected {item_id}")
    return {"id": str(item_id), "verification_status": VerificationStatus.REJECTED.value}


@router.post("/items/bulk", response_model=TaskSubmitResponse, status_code=202)
async def bulk_action(request: BulkActionRequest, admin: AdminUser):
    """
    Approve or reject many items in the background.

    Poll GET /api/v1/tasks/{task_id} for progress; the result lists
    per-item failures.
    """
    try:
        from workers.tasks import bulk_verify_items

        result = bulk_verify_items.delay(
            [str(i) for i in request.item_ids],
            request.action,
            request.reason,
            request.admin_notes,
        )

    except Exception as e:
        logger.error(f"Error submitting bulk action: {e}")
        raise HTTPException(
            status_code=503,
            detail=f"Failed to submit task. Is Redis running? Error: {e}"
        )

    logger.info(f"Admin {admin.id} queued bulk {request.action} of {len(request.item_ids)} items")
    return TaskSubmitResponse(
        task_id=result.id,
        status="PENDING",
        message="Bulk action submitted. Use GET /api/v1/tasks/{task_id} to check status.",
    )


# =============================================================================
# Users
# =============================================================================

@router.get("/users", response_model=list[UserProfile])
async def list_users(admin: AdminUser):
    return AdminService.get_all_users()


@router.post("/users/{user_id}/admin", response_model=UserProfile)
async def grant_admin(user_id: UUID, admin: AdminUser):
    return AdminService.make_user_admin(user_id)


@router.delete("/users/{user_id}/admin", response_model=UserProfile)
async def revoke_admin(user_id: UUID, admin: AdminUser):
    """Remove admin rights. Admins cannot demote themselves."""
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="Admins cannot remove their own admin rights")
    return AdminService.remove_admin_privileges(user_id)
