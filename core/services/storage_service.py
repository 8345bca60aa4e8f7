# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles marketplace image uploads to Supabase Storage.
#
# Path layout: marketplace-images/{seller_id}/{epoch_ms}-{random}.{ext}
# =============================================================================

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import PurePath

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import (
    ImageTooLargeError,
    InvalidImageError,
    StorageUploadError,
    TooManyImagesError,
)

logger = logging.getLogger(__name__)

# Storage bucket name
BUCKET_NAME = "marketplace-images"

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
}


@dataclass
class ImageUpload:
    """An image received from a multipart form."""
    filename: str
    content: bytes
    content_type: str | None = None


def image_extension(filename: str) -> str:
    return PurePath(filename or "").suffix.lower()


def validate_images(images: list[ImageUpload]) -> None:
    """
    Check count, extension and size of every image before any upload.

    Raises:
        TooManyImagesError: More than MAX_IMAGES_PER_ITEM images
        InvalidImageError: Extension not in ALLOWED_IMAGE_EXTENSIONS
        ImageTooLargeError: File larger than MAX_IMAGE_SIZE_MB
    """
    if len(images) > settings.MAX_IMAGES_PER_ITEM:
        raise TooManyImagesError(len(images), settings.MAX_IMAGES_PER_ITEM)

    allowed = settings.allowed_image_extensions_list
    for image in images:
        if image_extension(image.filename) not in allowed:
            raise InvalidImageError(image.filename, allowed)

        if len(image.content) > settings.max_image_size_bytes:
            raise ImageTooLargeError(
                image.filename,
                len(image.content) / (1024 * 1024),
                settings.MAX_IMAGE_SIZE_MB,
            )


def build_image_path(seller_id: str, filename: str) -> str:
    ext = image_extension(filename).lstrip(".")
    return f"{seller_id}/{int(time.time() * 1000)}-{secrets.token_hex(4)}.{ext}"


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading listing images and resolving their public URLs.
    """

    @staticmethod
    def upload_image(seller_id: str, image: ImageUpload) -> str:
        """
        Upload one image.

        Returns:
            Storage path inside the bucket

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()
        path = build_image_path(seller_id, image.filename)
        content_type = image.content_type or CONTENT_TYPES.get(
            image_extension(image.filename), "application/octet-stream"
        )

        try:
            client.storage.from_(BUCKET_NAME).upload(
                path=path,
                file=image.content,
                file_options={"content-type": content_type, "upsert": "false"}
            )

            logger.info(f"Uploaded image to storage: {path}")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def get_public_url(storage_path: str) -> str:
        client = SupabaseClient.get_client()
        return client.storage.from_(BUCKET_NAME).get_public_url(storage_path)

    @staticmethod
    def upload_images(seller_id: str, images: list[ImageUpload]) -> list[str]:
        """
        Validate then upload all images of a listing.

        Returns:
            Public URLs in upload order
        """
        validate_images(images)

        urls = []
        for image in images:
            path = StorageService.upload_image(seller_id, image)
            urls.append(StorageService.get_public_url(path))
        return urls
