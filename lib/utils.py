# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Small helpers shared by services and lib/ clients.
# =============================================================================

import re
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_WHITESPACE_RE = re.compile(r"\s")


# =============================================================================
# UUID / Time Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        item_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        item_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string for timestamp columns."""
    return datetime.now(timezone.utc).isoformat()


def strip_whitespace(value: str) -> str:
    """Remove every whitespace character, as used in progress keys."""
    return _WHITESPACE_RE.sub("", value)


# =============================================================================
# Email Validation
# =============================================================================

def validate_email_domain(email: str, allowed_domains: list[str]) -> tuple[bool, str]:
    """
    Check that an email is well formed and from an accepted provider.

    Args:
        email: Address entered at registration
        allowed_domains: Lower-case domains that are accepted

    Returns:
        Tuple of (is_valid, message). The message is empty when valid.

    Example:
        ok, msg = validate_email_domain("a@gmail.com", ["gmail.com"])  # (True, "")
    """
    if not _EMAIL_RE.match(email or ""):
        return False, "Please enter a valid email address"

    domain = email.split("@")[1].lower()
    if domain not in allowed_domains:
        return False, "Please use an official email from Gmail, Outlook, Yahoo, or your college domain"

    return True, ""


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Error raised by lib/ clients that have no FastAPI dependency.

    Services translate these into LearnConnectException subclasses; code and
    suggestion carry through to the API response.
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
