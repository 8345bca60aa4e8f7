# =============================================================================
# app/routers/tasks.py - Background Job Endpoints
# =============================================================================
# Polling and cancellation for bulk verification jobs. Admins start those
# jobs, so every route here requires an admin.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Path
from pydantic import BaseModel

from app.dependencies import AdminUser
from core.services.marketplace_service import invalidate_marketplace_cache
from lib.cache import TTLCache

logger = logging.getLogger(__name__)

router = APIRouter()

TaskId = Annotated[str, Path(description="Celery task ID")]

FINISHED_STATES = ("SUCCESS", "FAILURE", "REVOKED")

STATE_MESSAGES = {
    "PENDING": "Waiting in queue...",
    "STARTED": "Starting...",
    "SUCCESS": "Complete",
    "FAILURE": "Failed",
    "REVOKED": "Cancelled",
}

# Bulk jobs already reflected in this process's marketplace cache.
# Kept as long as Celery keeps results.
_synced_jobs = TTLCache(ttl_seconds=60 * 60)


# =============================================================================
# Response Models
# =============================================================================

class TaskSubmitResponse(BaseModel):
    """Returned when a job is queued."""
    task_id: str
    status: str
    message: str


class TaskStatusResponse(BaseModel):
    """
    Job state for polling.

    While a bulk job runs, current/total count processed items. When it
    finishes, result holds {action, total, succeeded, failed}.
    """
    task_id: str
    status: str
    progress: int | None = None
    current: int | None = None
    total: int | None = None
    message: str | None = None
    result: dict[str, Any] | None = None
    error: str | None = None


def _sync_marketplace_cache(status: TaskStatusResponse) -> None:
    """
    Drop the marketplace snapshot once per finished bulk job.

    The worker runs in its own process, so its invalidation never reaches
    the cache this API process serves listings from.
    """
    if status.status != "SUCCESS" or not (status.result or {}).get("succeeded"):
        return
    if _synced_jobs.get(status.task_id):
        return

    _synced_jobs.set(status.task_id, True)
    invalidate_marketplace_cache()
    logger.info(f"Bulk job {status.task_id} finished, marketplace cache refreshed")


def _async_result(task_id: str):
    from workers.celery_app import celery_app
    return celery_app.AsyncResult(task_id)


def _describe(task_id: str, result) -> TaskStatusResponse:
    state = result.status
    response = TaskStatusResponse(
        task_id=task_id,
        status=state,
        message=STATE_MESSAGES.get(state),
    )

    if state == "PROGRESS":
        meta = result.info or {}
        response.progress = meta.get("percent", 0)
        response.current = meta.get("current")
        response.total = meta.get("total")
        response.message = meta.get("message", "Processing...")
    elif state == "SUCCESS":
        response.progress = 100
        response.result = result.result
    elif state == "FAILURE":
        response.error = str(result.result) if result.result else "Unknown error"
    elif state in ("PENDING", "STARTED"):
        response.progress = 0

    return response


def _read_status(task_id: str) -> TaskStatusResponse:
    try:
        return _describe(task_id, _async_result(task_id))
    except Exception as e:
        logger.error(f"Error reading task {task_id}: {e}")
        raise HTTPException(status_code=503, detail=f"Result backend unavailable: {e}")


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(task_id: TaskId, admin: AdminUser):
    """
    Current state of a job.

    Unknown IDs report PENDING; Celery cannot tell them apart from queued jobs.
    """
    status = _read_status(task_id)
    _sync_marketplace_cache(status)
    return status


@router.get("/{task_id}/result")
async def get_task_result(task_id: TaskId, admin: AdminUser):
    """
    The bulk summary of a finished job.

    Raises:
        409: Job has not finished yet
    """
    status = _read_status(task_id)
    _sync_marketplace_cache(status)

    if status.status not in FINISHED_STATES:
        raise HTTPException(status_code=409, detail=f"Task is {status.status}, not finished")

    return status.model_dump(include={"task_id", "status", "result", "error"}, exclude_none=True)


@router.delete("/{task_id}")
async def cancel_task(task_id: TaskId, admin: AdminUser):
    """
    Cancel a queued or running job.

    Items a bulk job already processed keep their new status.
    """
    result = _async_result(task_id)

    if result.status in FINISHED_STATES:
        return {
            "task_id": task_id,
            "cancelled": False,
            "message": f"Task already {result.status.lower()}",
        }

    result.revoke(terminate=True)
    logger.info(f"Task {task_id} cancelled by admin {admin.id}")
    return {"task_id": task_id, "cancelled": True, "message": "Task cancelled"}
