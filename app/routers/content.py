# =============================================================================
# app/routers/content.py - Course Content Endpoints
# =============================================================================
# Read-only catalog: subjects of a year/branch/semester, their modules,
# notes and reference links.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import CurrentUser
from core.models.academics import Branch, Semester, Year
from core.models.content import ImportantLink, ModuleContent, NotesLink, Subject, SubjectSummary
from core.services.content_service import ContentService

router = APIRouter()

ModuleNumber = Annotated[int, Path(ge=1, description="Module number")]


@router.get("/{year}/{branch}/{semester}", response_model=list[SubjectSummary])
async def list_subjects(year: Year, branch: Branch, semester: Semester, user: CurrentUser):
    """
    Subjects of a partition.

    Empty when neither the spreadsheet nor the static catalog has data.
    """
    return ContentService.list_subjects(year.value, branch.value, semester.value)


@router.get("/{year}/{branch}/{semester}/{subject}", response_model=Subject)
async def get_subject(
    year: Year,
    branch: Branch,
    semester: Semester,
    subject: str,
    user: CurrentUser,
):
    """
    A subject with all modules, topics, videos and notes.

    Raises:
        404: Unknown subject
    """
    return ContentService.get_subject(year.value, branch.value, semester.value, subject)


@router.get("/{year}/{branch}/{semester}/{subject}/modules", response_model=list[ModuleContent])
async def list_modules(
    year: Year,
    branch: Branch,
    semester: Semester,
    subject: str,
    user: CurrentUser,
):
    return ContentService.list_modules(year.value, branch.value, semester.value, subject)


@router.get(
    "/{year}/{branch}/{semester}/{subject}/modules/{module_number}/notes",
    response_model=list[NotesLink],
)
async def get_notes_links(
    year: Year,
    branch: Branch,
    semester: Semester,
    subject: str,
    module_number: ModuleNumber,
    user: CurrentUser,
):
    """Module-level notes links."""
    return ContentService.get_notes_links(
        year.value, branch.value, semester.value, subject, module_number
    )


@router.get("/{year}/{branch}/{semester}/{subject}/links", response_model=list[ImportantLink])
async def get_important_links(
    year: Year,
    branch: Branch,
    semester: Semester,
    subject: str,
    user: CurrentUser,
):
    """Syllabus, question papers and other subject-wide links."""
    return ContentService.get_important_links(year.value, branch.value, semester.value, subject)
