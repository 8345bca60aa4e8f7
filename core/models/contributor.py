# =============================================================================
# core/models/contributor.py - Project Contributor Schema
# =============================================================================

from pydantic import BaseModel, Field


class Contributor(BaseModel):
    """A contributor to the project repository on GitHub."""
    login: str
    avatar_url: str = ""
    html_url: str = ""
    contributions: int = Field(default=0, ge=0)
