# =============================================================================
# core/models/marketplace.py - Marketplace Schemas
# =============================================================================
# These models define the API contract for the student marketplace:
# - MarketplaceItem / MarketplaceCategory: listing rows with joined data
# - ItemCreate / ItemUpdate: seller input
# - MarketplaceFilters: listing query
# - UserRating / RatingCreate: seller reputation
# - AdminStats / VerificationAction / BulkActionRequest: admin review
#
# Verification flow (performed by backend RPCs):
#     pending -> approved
#            \-> rejected
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .user import UserProfile


class ItemCondition(str, Enum):
    """Physical condition of a listed item."""
    NEW = "new"
    LIKE_NEW = "like_new"
    GOOD = "good"
    FAIR = "fair"


class VerificationStatus(str, Enum):
    """
    Admin review state of a listing.

    - pending: newly listed, hidden from the public marketplace
    - approved: visible to buyers
    - rejected: hidden, with a rejection_reason for the seller
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MarketplaceCategory(BaseModel):
    """A listing category (Books, Electronics, ...)."""
    id: UUID
    name: str
    icon: str = ""
    created_at: datetime | None = None


class MarketplaceItem(BaseModel):
    """
    A marketplace listing.

    `seller` and `category` are present when the row was fetched with joins.
    """
    id: UUID
    seller_id: UUID
    title: str
    description: str | None = None
    category_id: UUID
    price: float = Field(..., ge=0)
    condition: ItemCondition
    images: list[str] = Field(default_factory=list)
    location: str | None = None
    is_available: bool = True
    is_sold: bool = False
    views_count: int = Field(default=0, ge=0)

    verification_status: VerificationStatus = VerificationStatus.PENDING
    verified_by: UUID | None = None
    verified_at: datetime | None = None
    rejection_reason: str | None = None
    admin_notes: str | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None

    seller: UserProfile | None = None
    category: MarketplaceCategory | None = None


class MarketplaceFilters(BaseModel):
    """
    Listing filters. Falsy values are ignored.

    Example:
        {"category": "...", "min_price": 100, "search": "calculator"}
    """
    category: str | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    condition: ItemCondition | None = None
    location: str | None = None
    search: str | None = None

    def is_empty(self) -> bool:
        """True when no filter would change the query."""
        return not any(self.model_dump().values())


class ItemCreate(BaseModel):
    """Seller input for a new listing (images are uploaded separately)."""
    title: str = Field(..., min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    category_id: UUID
    price: float = Field(..., ge=0)
    condition: ItemCondition
    location: str | None = Field(default=None, max_length=120)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v.strip()


class ItemUpdate(BaseModel):
    """Editable listing fields. Omitted fields are left unchanged."""
    title: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    category_id: UUID | None = None
    price: float | None = Field(default=None, ge=0)
    condition: ItemCondition | None = None
    location: str | None = Field(default=None, max_length=120)
    is_available: bool | None = None


class UserRating(BaseModel):
    """A buyer's rating of a seller."""
    id: UUID
    rated_user_id: UUID
    rater_id: UUID
    rating: int = Field(..., ge=1, le=5)
    review: str | None = None
    item_id: UUID
    created_at: datetime | None = None
    rater: dict | None = None


class RatingCreate(BaseModel):
    """Input for rating a seller."""
    rating: int = Field(..., ge=1, le=5)
    review: str = Field(default="", max_length=1000)
    item_id: UUID


class ContactLink(BaseModel):
    """Pre-filled WhatsApp chat link for a listing."""
    url: str


# =============================================================================
# Admin
# =============================================================================

class AdminStats(BaseModel):
    """Dashboard counters."""
    total_items: int = 0
    pending_items: int = 0
    approved_items: int = 0
    rejected_items: int = 0
    total_users: int = 0
    recent_items: list[dict] = Field(default_factory=list)


class VerificationAction(BaseModel):
    """Approve/reject request body."""
    reason: str | None = Field(default=None, max_length=500)
    admin_notes: str | None = Field(default=None, max_length=1000)


class BulkActionRequest(BaseModel):
    """
    Apply the same verification action to several items.

    Example:
        {"item_ids": ["...", "..."], "action": "reject", "reason": "Duplicate"}
    """
    item_ids: list[UUID] = Field(..., min_length=1, max_length=200)
    action: Literal["approve", "reject"]
    reason: str | None = Field(default=None, max_length=500)
    admin_notes: str | None = Field(default=None, max_length=1000)
