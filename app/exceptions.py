# =============================================================================
# app/exceptions.py - API Errors
# =============================================================================
# Domain errors raised by core.services and turned into JSON by the handler
# at the bottom. Each one names its HTTP status and, where the caller can
# act on it, a suggestion.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class LearnConnectException(Exception):
    """
    Base for every error the API reports on purpose.

    Serialises as {detail, code, suggestion?, details?}.
    """

    def __init__(
        self,
        message: str,
        code: str = "LEARNCONNECT_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Auth / Profile Exceptions
# =============================================================================

class InvalidCredentialsError(LearnConnectException):
    """Raised when email/password sign-in fails."""

    def __init__(self):
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
            suggestion="Check your email and password, or register a new account",
        )


class RegistrationError(LearnConnectException):
    """Raised when the auth provider refuses a sign-up."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Registration failed: {error}",
            code="REGISTRATION_FAILED",
            status_code=400,
            suggestion="If the email is already registered, log in instead",
            details={"error": error}
        )


class InvalidEmailDomainError(LearnConnectException):
    """Raised when a registration email is malformed or from an unlisted domain."""

    def __init__(self, email: str, reason: str):
        super().__init__(
            message=reason,
            code="INVALID_EMAIL",
            status_code=400,
            suggestion="Please use an official email from Gmail, Outlook, Yahoo, or your college domain",
            details={"email": email}
        )


class ProfileNotFoundError(LearnConnectException):
    """Raised when a user has no row in public.users."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User profile not found: {user_id}",
            code="PROFILE_NOT_FOUND",
            status_code=404,
            suggestion="Call GET /auth/me once to create the profile",
            details={"user_id": user_id}
        )


class AdminRequiredError(LearnConnectException):
    """Raised when a non-admin calls an admin endpoint."""

    def __init__(self, user_id: str):
        super().__init__(
            message="Admin privileges required",
            code="ADMIN_REQUIRED",
            status_code=403,
            suggestion="Ask an existing admin to grant you admin access",
            details={"user_id": user_id}
        )


class InvalidAcademicSelectionError(LearnConnectException):
    """Raised when a year/branch/semester code is unknown."""

    def __init__(self, field: str, value: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid {field}: {value}",
            code="INVALID_ACADEMIC_SELECTION",
            status_code=400,
            suggestion=f"Choose one of: {', '.join(allowed)}",
            details={"field": field, "value": value, "allowed": allowed}
        )


# =============================================================================
# Content Exceptions
# =============================================================================

class SubjectNotFoundError(LearnConnectException):
    """Raised when a subject key is not in the catalog for a semester."""

    def __init__(self, subject_key: str, year: str, branch: str, semester: str):
        super().__init__(
            message=f"Subject not found: {subject_key}",
            code="SUBJECT_NOT_FOUND",
            status_code=404,
            suggestion="List the semester's subjects with GET /content/{year}/{branch}/{semester}",
            details={"subject": subject_key, "year": year, "branch": branch, "semester": semester}
        )


class ContributorsUnavailableError(LearnConnectException):
    """Raised when the repository host cannot be reached."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to fetch contributors: {error}",
            code="CONTRIBUTORS_UNAVAILABLE",
            status_code=502,
            suggestion="Try again later",
            details={"error": error}
        )


# =============================================================================
# Marketplace Exceptions
# =============================================================================

class ItemNotFoundError(LearnConnectException):
    """Raised when a marketplace item ID doesn't exist."""

    def __init__(self, item_id: str):
        super().__init__(
            message=f"Item not found: {item_id}",
            code="ITEM_NOT_FOUND",
            status_code=404,
            suggestion="Check that the item_id is correct",
            details={"item_id": item_id}
        )


class CategoryNotFoundError(LearnConnectException):
    """Raised when an item references an unknown category."""

    def __init__(self, category_id: str):
        super().__init__(
            message=f"Category not found: {category_id}",
            code="CATEGORY_NOT_FOUND",
            status_code=404,
            suggestion="List categories with GET /marketplace/categories",
            details={"category_id": category_id}
        )


class NotItemOwnerError(LearnConnectException):
    """Raised when a user edits an item they did not list."""

    def __init__(self, item_id: str):
        super().__init__(
            message=f"You do not own item: {item_id}",
            code="NOT_ITEM_OWNER",
            status_code=403,
            suggestion="Only the seller can change a listing",
            details={"item_id": item_id}
        )


class ItemAlreadySoldError(LearnConnectException):
    """Raised when a seller tries to relist an item marked as sold."""

    def __init__(self, item_id: str):
        super().__init__(
            message=f"Item is already sold: {item_id}",
            code="ITEM_ALREADY_SOLD",
            status_code=409,
            suggestion="Create a new listing to sell another unit",
            details={"item_id": item_id}
        )


class SellerContactUnavailableError(LearnConnectException):
    """Raised when a seller has no phone number to contact."""

    def __init__(self, item_id: str):
        super().__init__(
            message=f"Seller of item {item_id} has no contact number",
            code="SELLER_CONTACT_UNAVAILABLE",
            status_code=404,
            suggestion="Ask the seller to add a phone number to their profile",
            details={"item_id": item_id}
        )


class SelfRatingError(LearnConnectException):
    """Raised when a user tries to rate themselves."""

    def __init__(self, user_id: str):
        super().__init__(
            message="You cannot rate yourself",
            code="SELF_RATING",
            status_code=400,
            details={"user_id": user_id}
        )


class InvalidVerificationTransitionError(LearnConnectException):
    """Raised when an admin acts on an item that is no longer pending."""

    def __init__(self, item_id: str, current: str, action: str):
        super().__init__(
            message=f"Cannot {action} item in status '{current}'",
            code="INVALID_VERIFICATION_TRANSITION",
            status_code=409,
            suggestion="Only pending items can be approved or rejected",
            details={"item_id": item_id, "status": current, "action": action}
        )


class RejectionReasonRequiredError(LearnConnectException):
    """Raised when an item is rejected without a reason."""

    def __init__(self, item_id: str):
        super().__init__(
            message=f"A rejection reason is required for item {item_id}",
            code="REJECTION_REASON_REQUIRED",
            status_code=400,
            suggestion="Tell the seller why the listing was rejected",
            details={"item_id": item_id}
        )


# =============================================================================
# Image Exceptions
# =============================================================================

class InvalidImageError(LearnConnectException):
    """Raised when an uploaded image type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid image type: {filename}",
            code="INVALID_IMAGE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class ImageTooLargeError(LearnConnectException):
    """Raised when an uploaded image exceeds the size limit."""

    def __init__(self, filename: str, size_mb: float, max_mb: int):
        super().__init__(
            message=f"Image too large: {filename} is {size_mb:.1f}MB (max: {max_mb}MB)",
            code="IMAGE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload images smaller than {max_mb}MB",
            details={"filename": filename, "size_mb": size_mb, "max_mb": max_mb}
        )


class TooManyImagesError(LearnConnectException):
    """Raised when a listing has more images than allowed."""

    def __init__(self, count: int, max_images: int):
        super().__init__(
            message=f"Too many images: {count} (max: {max_images})",
            code="TOO_MANY_IMAGES",
            status_code=400,
            suggestion=f"Attach at most {max_images} images per item",
            details={"count": count, "max_images": max_images}
        )


class StorageUploadError(LearnConnectException):
    """An item image could not be written to the marketplace bucket."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Could not store item image: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=502,
            suggestion="The listing was not created; submit it again",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def learnconnect_exception_handler(
    request: Request,
    exc: LearnConnectException
) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
