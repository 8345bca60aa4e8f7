# =============================================================================
# app/routers/progress.py - Study Progress Endpoints
# =============================================================================
# The caller's per-subject video completion.
# =============================================================================

from fastapi import APIRouter

from app.dependencies import CurrentUser
from core.models.academics import Branch, Semester, Year
from core.models.progress import ProgressData, SubjectProgress, VideoProgressUpdate
from core.services.progress_service import ProgressService

router = APIRouter()


@router.get("/{subject}", response_model=ProgressData, response_model_by_alias=True)
async def get_progress(subject: str, user: CurrentUser):
    """Stored progress for a subject (empty if none)."""
    return ProgressService.get_progress(user.id, subject)


@router.put("/{subject}/videos", response_model=ProgressData, response_model_by_alias=True)
async def set_video_completed(subject: str, update: VideoProgressUpdate, user: CurrentUser):
    """
    Mark a video complete or incomplete.

    Returns the whole subject progress with the refreshed topic counter.
    """
    return ProgressService.set_video_completed(user.id, subject, update)


@router.delete("/{subject}", status_code=204)
async def reset_progress(subject: str, user: CurrentUser):
    ProgressService.reset_progress(user.id, subject)


@router.get("/{year}/{branch}/{semester}/{subject}/summary", response_model=SubjectProgress)
async def progress_summary(
    year: Year,
    branch: Branch,
    semester: Semester,
    subject: str,
    user: CurrentUser,
):
    """
    Completion counts per topic, per module and for the whole subject.

    Raises:
        404: Unknown subject
    """
    return ProgressService.progress_summary(
        user.id, year.value, branch.value, semester.value, subject
    )
