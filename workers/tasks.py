# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks for admin review.
#
# Tasks:
# - bulk_verify_items: Approve or reject many listings, reporting progress
# =============================================================================

import logging
from typing import Any

from celery import current_task

from workers.celery_app import celery_app

logger = logging.getLogger(__name__)


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(current: int, total: int, message: str = "Processing..."):
    """
    Update task progress for polling.

    Args:
        current: Current step number
        total: Total steps
        message: Status message
    """
    if current_task:
        current_task.update_state(
            state="PROGRESS",
            meta={
                "current": current,
                "total": total,
                "percent": int((current / total) * 100) if total else 100,
                "message": message,
            }
        )


# =============================================================================
# Admin Review
# =============================================================================

# Bound to celery_app: in API request threads current_app is Celery's
# unconfigured default app.
@celery_app.task(bind=True, name="workers.tasks.bulk_verify_items")
def bulk_verify_items(
    self,
    item_ids: list[str],
    action: str,
    reason: str | None = None,
    admin_notes: str | None = None,
) -> dict[str, Any]:
    """
    Apply one verification action to many items.

    Items that are missing or no longer pending are reported in "failed";
    the rest of the batch still runs.

    Returns:
        Dict with action, total, succeeded (ids) and failed
        ({item_id, code, error} per item)
    """
    from core.services.admin_service import AdminService

    logger.info(f"Bulk {action} of {len(item_ids)} items [{self.request.id}]")
    update_progress(0, len(item_ids), f"Starting bulk {action}...")

    def report(done: int, total: int, item_id: str) -> None:
        update_progress(done, total, f"Processed {done} of {total} items")

    return AdminService.perform_bulk_action(
        item_ids,
        action,
        reason=reason,
        admin_notes=admin_notes,
        on_progress=report,
    )

