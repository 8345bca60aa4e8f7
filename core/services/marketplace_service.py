# =============================================================================
# core/services/marketplace_service.py - Marketplace Business Logic
# =============================================================================
# Listings, categories, views, seller ratings and contact links.
#
# The service-role client bypasses RLS, so visibility (approved + available)
# and ownership are enforced here.
#
# The unfiltered listing and the category list are preloaded together into an
# in-process TTL cache; any write that changes what buyers see invalidates it.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote
from uuid import UUID

from lib.cache import TTLCache
from lib.supabase_client import ITEM_SELECT, SupabaseClient, SupabaseClientError
from lib.utils import utc_now_iso
from app.config import settings
from app.exceptions import (
    CategoryNotFoundError,
    ItemAlreadySoldError,
    ItemNotFoundError,
    NotItemOwnerError,
    SelfRatingError,
    SellerContactUnavailableError,
)
from core.models.marketplace import (
    ItemCreate,
    ItemUpdate,
    MarketplaceFilters,
    RatingCreate,
    VerificationStatus,
)
from core.services.storage_service import ImageUpload, StorageService

logger = logging.getLogger(__name__)

ITEMS_TABLE = "marketplace_items"
CATEGORIES_TABLE = "marketplace_categories"
VIEWS_TABLE = "marketplace_item_views"
RATINGS_TABLE = "user_ratings"

WHATSAPP_URL = "https://wa.me/{phone}?text={text}"
CONTACT_MESSAGE = (
    "Hi {seller}! I'm interested in your \"{title}\" listed on "
    "{brand} marketplace. Is it still available?"
)

# Characters encodeURIComponent leaves alone besides alphanumerics and -_.~
_URI_COMPONENT_SAFE = "!*'()"

marketplace_cache = TTLCache(ttl_seconds=settings.MARKETPLACE_CACHE_TTL_SECONDS)

CACHE_KEY = "marketplace"


def invalidate_marketplace_cache() -> None:
    """Drop the preloaded listing so the next read hits the database."""
    marketplace_cache.invalidate(CACHE_KEY)
    logger.debug("Marketplace cache invalidated")


def generate_whatsapp_url(phone: str, item_title: str, seller_name: str) -> str:
    """
    Build a wa.me link with a pre-filled enquiry.

    The phone is reduced to digits and given the country code unless it
    already starts with it.
    """
    message = CONTACT_MESSAGE.format(
        seller=seller_name,
        title=item_title,
        brand=settings.MARKETPLACE_BRAND,
    )
    digits = "".join(ch for ch in phone if ch.isdigit())
    country = settings.WHATSAPP_COUNTRY_CODE
    if not digits.startswith(country):
        digits = f"{country}{digits}"

    return WHATSAPP_URL.format(phone=digits, text=quote(message, safe=_URI_COMPONENT_SAFE))


def _start_of_utc_day(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.replace(hour=0, minute=0, second=0, microsecond=0).isoformat()


class MarketplaceService:
    """
    Service for marketplace operations.

    All methods return plain row dicts; routes validate them into models.
    """

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    @staticmethod
    def get_categories() -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = (
            client.table(CATEGORIES_TABLE)
            .select("*")
            .order("name")
            .execute()
        )
        return response.data or []

    @staticmethod
    def _query_items(filters: MarketplaceFilters) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()

        query = (
            client.table(ITEMS_TABLE)
            .select(ITEM_SELECT)
            .eq("is_available", True)
            .eq("verification_status", VerificationStatus.APPROVED.value)
            .order("created_at", desc=True)
        )

        if filters.category:
            query = query.eq("category_id", filters.category)
        if filters.min_price:
            query = query.gte("price", filters.min_price)
        if filters.max_price:
            query = query.lte("price", filters.max_price)
        if filters.condition:
            query = query.eq("condition", filters.condition.value)
        if filters.location:
            query = query.ilike("location", f"%{filters.location}%")
        if filters.search:
            term = filters.search
            query = query.or_(f"title.ilike.%{term}%,description.ilike.%{term}%")

        response = query.execute()
        return response.data or []

    @staticmethod
    def preload() -> dict[str, list[dict[str, Any]]]:
        """
        Load categories and the unfiltered listing into the cache.

        Returns:
            {"items": [...], "categories": [...]}
        """
        snapshot = {
            "items": MarketplaceService._query_items(MarketplaceFilters()),
            "categories": MarketplaceService.get_categories(),
        }
        marketplace_cache.set(CACHE_KEY, snapshot)
        logger.info(
            f"Preloaded marketplace: {len(snapshot['items'])} items, "
            f"{len(snapshot['categories'])} categories"
        )
        return snapshot

    @staticmethod
    def get_items(filters: MarketplaceFilters | None = None) -> list[dict[str, Any]]:
        """
        Publicly visible items, newest first.

        Only approved and available items are listed. Without filters the
        cached snapshot is used.
        """
        filters = filters or MarketplaceFilters()

        if filters.is_empty():
            snapshot = marketplace_cache.get(CACHE_KEY)
            if snapshot is None:
                snapshot = MarketplaceService.preload()
            return snapshot["items"]

        return MarketplaceService._query_items(filters)

    @staticmethod
    def is_public(item: dict[str, Any]) -> bool:
        """Approved and still available, i.e. shown to every buyer."""
        return (
            item.get("verification_status") == VerificationStatus.APPROVED.value
            and bool(item.get("is_available"))
        )

    @staticmethod
    def get_item_by_id(item_id: UUID | str, viewer_id: UUID | str) -> dict[str, Any]:
        """
        An item as seen by `viewer_id`.

        Pending, rejected and withdrawn items exist only for their seller;
        anyone else gets the same error as for a missing ID.

        Raises:
            ItemNotFoundError: No such item, or not visible to this viewer
        """
        item = SupabaseClient.fetch_item(item_id)
        if not item:
            raise ItemNotFoundError(str(item_id))
        if not MarketplaceService.is_public(item) and str(item.get("seller_id")) != str(viewer_id):
            logger.info(f"Hid {item.get('verification_status')} item {item_id} from {viewer_id}")
            raise ItemNotFoundError(str(item_id))
        return item

    # -------------------------------------------------------------------------
    # Seller actions
    # -------------------------------------------------------------------------

    @staticmethod
    def _ensure_category(category_id: UUID | str) -> None:
        client = SupabaseClient.get_client()
        response = (
            client.table(CATEGORIES_TABLE)
            .select("id")
            .eq("id", str(category_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            raise CategoryNotFoundError(str(category_id))

    @staticmethod
    def _get_owned_item(item_id: UUID | str, seller_id: UUID | str) -> dict[str, Any]:
        item = SupabaseClient.fetch_item(item_id, select="*")
        if not item:
            raise ItemNotFoundError(str(item_id))
        if str(item.get("seller_id")) != str(seller_id):
            raise NotItemOwnerError(str(item_id))
        return item

    @staticmethod
    def create_item(
        data: ItemCreate,
        images: list[ImageUpload],
        seller_id: UUID | str,
    ) -> str:
        """
        Upload images and insert a new listing.

        New listings start as pending and stay hidden until an admin
        approves them.

        Returns:
            The new item ID

        Raises:
            CategoryNotFoundError: Unknown category
            InvalidImageError / ImageTooLargeError / TooManyImagesError
            StorageUploadError: If an upload fails
        """
        seller_id_str = str(seller_id)
        MarketplaceService._ensure_category(data.category_id)

        image_urls = StorageService.upload_images(seller_id_str, images)

        row = {
            "seller_id": seller_id_str,
            "title": data.title,
            "description": data.description,
            "category_id": str(data.category_id),
            "price": data.price,
            "condition": data.condition.value,
            "location": data.location,
            "images": image_urls,
            "verification_status": VerificationStatus.PENDING.value,
        }

        client = SupabaseClient.get_client()
        response = client.table(ITEMS_TABLE).insert(row).execute()

        if not response.data:
            raise SupabaseClientError("Insert returned no data", code="INSERT_NO_DATA")

        item_id = response.data[0]["id"]
        invalidate_marketplace_cache()
        logger.info(f"Created item {item_id} for seller {seller_id_str} ({len(image_urls)} images)")
        return item_id

    @staticmethod
    def update_item(
        item_id: UUID | str,
        updates: ItemUpdate,
        seller_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Update the seller's own listing.

        Raises:
            ItemNotFoundError: If the item doesn't exist
            NotItemOwnerError: If the caller is not the seller
            ItemAlreadySoldError: Making a sold item available again
        """
        current = MarketplaceService._get_owned_item(item_id, seller_id)

        update_data = updates.model_dump(exclude_none=True, mode="json")
        if update_data.get("is_available") and current.get("is_sold"):
            raise ItemAlreadySoldError(str(item_id))
        if "category_id" in update_data:
            MarketplaceService._ensure_category(update_data["category_id"])
        update_data["updated_at"] = utc_now_iso()

        client = SupabaseClient.get_client()
        response = (
            client.table(ITEMS_TABLE)
            .update(update_data)
            .eq("id", str(item_id))
            .execute()
        )

        invalidate_marketplace_cache()
        logger.info(f"Updated item {item_id}")
        return response.data[0] if response.data else {**current, **update_data}

    @staticmethod
    def mark_as_sold(item_id: UUID | str, seller_id: UUID | str) -> None:
        MarketplaceService._get_owned_item(item_id, seller_id)

        client = SupabaseClient.get_client()
        (
            client.table(ITEMS_TABLE)
            .update({
                "is_sold": True,
                "is_available": False,
                "updated_at": utc_now_iso(),
            })
            .eq("id", str(item_id))
            .execute()
        )

        invalidate_marketplace_cache()
        logger.info(f"Item {item_id} marked as sold")

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @staticmethod
    def record_view(item_id: UUID | str, viewer_id: UUID | str) -> bool:
        """
        Count a view at most once per viewer, item and UTC day.

        Returns:
            True if a new view was recorded
        """
        client = SupabaseClient.get_client()
        item_id_str = str(item_id)
        viewer_id_str = str(viewer_id)

        existing = (
            client.table(VIEWS_TABLE)
            .select("id")
            .eq("item_id", item_id_str)
            .eq("viewer_id", viewer_id_str)
            .gte("viewed_at", _start_of_utc_day())
            .limit(1)
            .execute()
        )
        if existing.data:
            return False

        client.table(VIEWS_TABLE).insert({
            "item_id": item_id_str,
            "viewer_id": viewer_id_str,
        }).execute()
        SupabaseClient.call_rpc("increment_item_views", {"item_id": item_id_str})
        return True

    # -------------------------------------------------------------------------
    # Sellers
    # -------------------------------------------------------------------------

    @staticmethod
    def get_user_items(user_id: UUID | str, approved_only: bool = False) -> list[dict[str, Any]]:
        """
        A seller's items, newest first.

        Sellers see their own items in every verification state; other
        users pass approved_only and see approved items only.
        """
        client = SupabaseClient.get_client()
        query = (
            client.table(ITEMS_TABLE)
            .select("*, category:marketplace_categories(*)")
            .eq("seller_id", str(user_id))
        )
        if approved_only:
            query = query.eq("verification_status", VerificationStatus.APPROVED.value)

        response = query.order("created_at", desc=True).execute()
        return response.data or []

    @staticmethod
    def get_user_ratings(user_id: UUID | str) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = (
            client.table(RATINGS_TABLE)
            .select("*, rater:users!user_ratings_rater_id_fkey(name, avatar_url)")
            .eq("rated_user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    @staticmethod
    def add_rating(
        rated_user_id: UUID | str,
        rater_id: UUID | str,
        rating: RatingCreate,
    ) -> float:
        """
        Rate a seller and refresh their average.

        Returns:
            The new average rating

        Raises:
            SelfRatingError: If a user rates themselves
        """
        rated = str(rated_user_id)
        if rated == str(rater_id):
            raise SelfRatingError(rated)

        client = SupabaseClient.get_client()
        client.table(RATINGS_TABLE).insert({
            "rated_user_id": rated,
            "rater_id": str(rater_id),
            "rating": rating.rating,
            "review": rating.review,
            "item_id": str(rating.item_id),
        }).execute()

        return MarketplaceService.update_user_rating(rated)

    @staticmethod
    def update_user_rating(user_id: str) -> float:
        """Recompute users.rating as the mean of all ratings, to 2 decimals."""
        client = SupabaseClient.get_client()
        response = (
            client.table(RATINGS_TABLE)
            .select("rating")
            .eq("rated_user_id", user_id)
            .execute()
        )
        ratings = [row["rating"] for row in response.data or []]
        if not ratings:
            return 0.0

        average = round(sum(ratings) / len(ratings), 2)
        client.table("users").update({"rating": average}).eq("id", user_id).execute()
        logger.info(f"User {user_id} rating is now {average} ({len(ratings)} ratings)")
        return average

    @staticmethod
    def get_contact_url(item_id: UUID | str, viewer_id: UUID | str) -> str:
        """
        WhatsApp link for an item's seller.

        Raises:
            ItemNotFoundError: If the item doesn't exist or is not visible
            SellerContactUnavailableError: If the seller has no phone
        """
        item = MarketplaceService.get_item_by_id(item_id, viewer_id)
        seller = item.get("seller") or {}
        phone = seller.get("phone") or ""
        if not any(ch.isdigit() for ch in phone):
            raise SellerContactUnavailableError(str(item_id))
        return generate_whatsapp_url(phone, item["title"], seller.get("name") or "there")
