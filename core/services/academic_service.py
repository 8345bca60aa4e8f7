# =============================================================================
# core/services/academic_service.py - Year/Branch/Semester Selection
# =============================================================================
# Validates catalog partition codes and stores the user's current selection
# on their profile. The selection resolves to the course route
# /{year}/{branch}/{semester}.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from core.models.academics import (
    BRANCH_LABELS,
    SEMESTER_LABELS,
    YEAR_LABELS,
    AcademicOptions,
    AcademicSelection,
    AcademicSelectionResponse,
    Branch,
    Option,
    Semester,
    Year,
)
from app.exceptions import InvalidAcademicSelectionError

logger = logging.getLogger(__name__)

_ENUMS = {"year": Year, "branch": Branch, "semester": Semester}


def course_path(year: str, branch: str, semester: str) -> str:
    """Build the course route for a selection."""
    return f"/{year}/{branch}/{semester}"


class AcademicService:
    """Selection validation and persistence."""

    @staticmethod
    def get_options() -> AcademicOptions:
        return AcademicOptions(
            years=[Option(value=k.value, label=v) for k, v in YEAR_LABELS.items()],
            branches=[Option(value=k.value, label=v) for k, v in BRANCH_LABELS.items()],
            semesters=[Option(value=k.value, label=v) for k, v in SEMESTER_LABELS.items()],
        )

    @staticmethod
    def normalize_code(field: str, value: str) -> str:
        """
        Lower-case and validate one code.

        Raises:
            InvalidAcademicSelectionError: If the code is unknown
        """
        enum_cls = _ENUMS[field]
        code = (value or "").strip().lower()
        allowed = [member.value for member in enum_cls]
        if code not in allowed:
            raise InvalidAcademicSelectionError(field, value, allowed)
        return code

    @staticmethod
    def normalize(selection: AcademicSelection) -> AcademicSelection:
        return AcademicSelection(
            year=AcademicService.normalize_code("year", selection.year),
            branch=AcademicService.normalize_code("branch", selection.branch),
            semester=AcademicService.normalize_code("semester", selection.semester),
        )

    @staticmethod
    def save_selection(
        user_id: UUID | str,
        selection: AcademicSelection,
    ) -> AcademicSelectionResponse:
        """
        Validate, persist on the profile, and resolve the course route.

        Returns:
            Selection with its path, e.g. /fy/comps/odd
        """
        normalized = AcademicService.normalize(selection)
        client = SupabaseClient.get_client()

        try:
            client.table("users").update(normalized.model_dump()).eq("id", str(user_id)).execute()
        except Exception as e:
            logger.error(f"Failed to save academic selection: {e}")
            raise

        logger.info(f"User {user_id} selected {normalized.year}/{normalized.branch}/{normalized.semester}")
        return AcademicSelectionResponse(
            **normalized.model_dump(),
            path=course_path(normalized.year, normalized.branch, normalized.semester),
        )

    @staticmethod
    def selection_from_profile(profile: dict[str, Any]) -> AcademicSelectionResponse:
        """
        Read the stored selection. path is None unless all three codes are valid.
        """
        values = {field: (profile.get(field) or "") for field in _ENUMS}
        try:
            normalized = {f: AcademicService.normalize_code(f, v) for f, v in values.items()}
        except InvalidAcademicSelectionError:
            return AcademicSelectionResponse()

        return AcademicSelectionResponse(
            **normalized,
            path=course_path(normalized["year"], normalized["branch"], normalized["semester"]),
        )
