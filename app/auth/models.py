# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Request and response bodies for /auth, plus the AuthUser built from a token.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from typing import Optional


class AuthUser(BaseModel):
    """
    Caller identity taken from a verified access token.

    Profile data (college, is_admin) lives in the users table, not here.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None


class RegisterRequest(BaseModel):
    """
    Registration form.

    Example:
        {
            "name": "Asha",
            "email": "asha@gmail.com",
            "password": "s3cret!",
            "college": "VJTI",
            "branch": "comps",
            "year": "fy",
            "semester": "odd"
        }
    """
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6, max_length=128)
    college: str = Field(..., min_length=1, max_length=200)
    branch: str
    year: str
    semester: str


class LoginRequest(BaseModel):
    """Email/password sign-in."""
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class PasswordChangeRequest(BaseModel):
    """New password for the current user."""
    new_password: str = Field(..., min_length=6, max_length=128)


class AuthSession(BaseModel):
    """Tokens returned after sign-in or sign-up."""
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"
    user_id: UUID
    email: Optional[str] = None


class RegisterResponse(BaseModel):
    """Registration result. session is None while email confirmation is pending."""
    user_id: UUID
    session: Optional[AuthSession] = None
    message: str = "Registration successful"
