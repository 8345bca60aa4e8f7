# =============================================================================
# app/routers/marketplace.py - Marketplace Endpoints
# =============================================================================
# Buyer and seller endpoints. Listings are created as multipart forms so
# images travel with the item fields.
# =============================================================================

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, ValidationError

from app.dependencies import CurrentUser
from core.models.marketplace import (
    ContactLink,
    ItemCondition,
    ItemCreate,
    ItemUpdate,
    MarketplaceCategory,
    MarketplaceFilters,
    MarketplaceItem,
    RatingCreate,
    UserRating,
)
from core.services.marketplace_service import MarketplaceService
from core.services.storage_service import ImageUpload

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class ItemCreatedResponse(BaseModel):
    """Result of listing a new item."""
    id: UUID
    verification_status: str = "pending"
    message: str = "Item submitted for review"


class RatingResponse(BaseModel):
    """The rated seller's new average."""
    rated_user_id: UUID
    rating: float


# =============================================================================
# Catalog
# =============================================================================

@router.get("/categories", response_model=list[MarketplaceCategory])
async def get_categories(user: CurrentUser):
    return MarketplaceService.get_categories()


@router.get("/items", response_model=list[MarketplaceItem])
async def list_items(
    user: CurrentUser,
    filters: Annotated[MarketplaceFilters, Depends()],
):
    """
    Approved, available items, newest first.

    Query parameters: category, min_price, max_price, condition, location,
    search. Each is applied only when set.
    """
    return MarketplaceService.get_items(filters)


@router.get("/items/{item_id}", response_model=MarketplaceItem)
async def get_item(item_id: UUID, user: CurrentUser, background_tasks: BackgroundTasks):
    """
    Item details. Counts a view for the caller once per day.

    Raises:
        404: Item not found, or not approved and the caller is not the seller
    """
    item = MarketplaceService.get_item_by_id(item_id, user.id)
    if str(item.get("seller_id")) != str(user.id):
        background_tasks.add_task(MarketplaceService.record_view, item_id, user.id)
    return item


@router.get("/items/{item_id}/contact", response_model=ContactLink)
async def get_contact_link(item_id: UUID, user: CurrentUser):
    """
    WhatsApp chat link with a pre-filled enquiry to the seller.

    Raises:
        404: Item not found or hidden, or seller has no phone number
    """
    return ContactLink(url=MarketplaceService.get_contact_url(item_id, user.id))


# =============================================================================
# Seller actions
# =============================================================================

@router.post("/items", response_model=ItemCreatedResponse, status_code=201)
async def create_item(
    user: CurrentUser,
    title: Annotated[str, Form()],
    category_id: Annotated[UUID, Form()],
    price: Annotated[float, Form(ge=0)],
    condition: Annotated[ItemCondition, Form()],
    description: Annotated[Optional[str], Form()] = None,
    location: Annotated[Optional[str], Form()] = None,
    images: Annotated[list[UploadFile], File()] = [],
):
    """
    List a new item for sale.

    The item stays hidden until an admin approves it.

    Raises:
        400: Invalid image type or too many images
        404: Unknown category
        413: Image too large
    """
    try:
        data = ItemCreate(
            title=title,
            description=description,
            category_id=category_id,
            price=price,
            condition=condition,
            location=location,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False),
        )

    uploads = [
        ImageUpload(
            filename=image.filename or "",
            content=await image.read(),
            content_type=image.content_type,
        )
        for image in images
    ]

    item_id = MarketplaceService.create_item(data, uploads, user.id)
    return ItemCreatedResponse(id=item_id)


@router.patch("/items/{item_id}")
async def update_item(item_id: UUID, updates: ItemUpdate, user: CurrentUser):
    """
    Edit the caller's own listing.

    Raises:
        403: Not the seller
        404: Item not found
    """
    return MarketplaceService.update_item(item_id, updates, user.id)


@router.post("/items/{item_id}/sold")
async def mark_as_sold(item_id: UUID, user: CurrentUser):
    """Mark the caller's own listing as sold; it leaves the public listing."""
    MarketplaceService.mark_as_sold(item_id, user.id)
    return {"id": str(item_id), "is_sold": True, "is_available": False}


@router.get("/me/items", response_model=list[MarketplaceItem])
async def get_my_items(user: CurrentUser):
    """The caller's listings in every verification state."""
    return MarketplaceService.get_user_items(user.id)


# =============================================================================
# Sellers
# =============================================================================

@router.get("/users/{user_id}/items", response_model=list[MarketplaceItem])
async def get_user_items(user_id: UUID, user: CurrentUser):
    """A seller's approved items; the seller sees all of their own."""
    return MarketplaceService.get_user_items(user_id, approved_only=user_id != user.id)


@router.get("/users/{user_id}/ratings", response_model=list[UserRating])
async def get_user_ratings(user_id: UUID, user: CurrentUser):
    return MarketplaceService.get_user_ratings(user_id)


@router.post("/users/{user_id}/ratings", response_model=RatingResponse, status_code=201)
async def add_rating(user_id: UUID, rating: RatingCreate, user: CurrentUser):
    """
    Rate a seller from 1 to 5.

    Raises:
        400: Rating yourself
    """
    average = MarketplaceService.add_rating(user_id, user.id, rating)
    return RatingResponse(rated_user_id=user_id, rating=average)
