# =============================================================================
# app/routers/academics.py - Academic Selection Endpoints
# =============================================================================
# Year/branch/semester choices and the user's saved selection.
# =============================================================================

from fastapi import APIRouter

from app.dependencies import CurrentUser
from core.models.academics import AcademicOptions, AcademicSelection, AcademicSelectionResponse
from core.services.academic_service import AcademicService
from core.services.profile_service import ProfileService

router = APIRouter()


@router.get("/options", response_model=AcademicOptions)
async def get_options(user: CurrentUser):
    """All selectable years, branches and semesters with labels."""
    return AcademicService.get_options()


@router.get("/selection", response_model=AcademicSelectionResponse)
async def get_selection(user: CurrentUser):
    """
    The caller's stored selection.

    path is null while the profile still holds unset values.
    """
    profile = ProfileService.ensure_profile(user.id, user.email)
    return AcademicService.selection_from_profile(profile)


@router.post("/selection", response_model=AcademicSelectionResponse)
async def save_selection(selection: AcademicSelection, user: CurrentUser):
    """
    Save a selection and get the course route to navigate to.

    Raises:
        400: Unknown year, branch or semester code
    """
    return AcademicService.save_selection(user.id, selection)
