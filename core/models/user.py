# =============================================================================
# core/models/user.py - User Profile Schemas
# =============================================================================
# Mirrors public.users. Auth identities live in Supabase Auth; this table
# holds the academic profile and marketplace reputation.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

NOT_SPECIFIED = "Not specified"


class UserProfile(BaseModel):
    """
    A row of public.users.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "name": "Asha",
            "email": "asha@gmail.com",
            "college": "VJTI",
            "branch": "comps",
            "year": "fy",
            "semester": "odd",
            "rating": 4.5,
            "total_sales": 3,
            "is_admin": false
        }
    """
    id: UUID
    name: str = ""
    email: str | None = None
    college: str = NOT_SPECIFIED
    branch: str = NOT_SPECIFIED
    year: str = NOT_SPECIFIED
    semester: str = NOT_SPECIFIED
    phone: str | None = None
    avatar_url: str | None = None
    rating: float = Field(default=0.0, ge=0, le=5)
    total_sales: int = Field(default=0, ge=0)
    is_verified: bool = False
    is_active: bool = True
    is_admin: bool = False
    created_at: datetime | None = None


class ProfileCreate(BaseModel):
    """Fields written when a profile row is first created."""
    id: UUID
    name: str = Field(..., min_length=1, max_length=100)
    email: str
    college: str = NOT_SPECIFIED
    branch: str = NOT_SPECIFIED
    year: str = NOT_SPECIFIED
    semester: str = NOT_SPECIFIED

    def to_row(self) -> dict:
        """Row for insertion, with the default flags a new account starts with."""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "college": self.college,
            "branch": self.branch,
            "year": self.year,
            "semester": self.semester,
            "phone": "",
            "avatar_url": None,
            "is_verified": False,
            "is_active": True,
            "is_admin": False,
        }


class ProfileUpdate(BaseModel):
    """
    Editable profile fields. Omitted fields are left unchanged.
    """
    name: str | None = Field(default=None, min_length=1, max_length=100)
    college: str | None = Field(default=None, max_length=200)
    branch: str | None = None
    year: str | None = None
    semester: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    avatar_url: str | None = None
