# =============================================================================
# app/routers/contributors.py - Contributors Endpoint
# =============================================================================

from fastapi import APIRouter

from app.dependencies import CurrentUser
from core.models.contributor import Contributor
from core.services.contributors_service import ContributorsService

router = APIRouter()


@router.get("", response_model=list[Contributor])
async def list_contributors(user: CurrentUser):
    """
    People who contributed to the project repository.

    Raises:
        502: GitHub could not be reached
    """
    return ContributorsService.get_contributors()
