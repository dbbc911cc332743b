# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles image uploads to Supabase Storage:
# - business-images: listing photos, stored at {business_id}/{timestamp}.{ext}
# - platform-assets: logo and favicon
# =============================================================================

import logging
import time
from pathlib import PurePath

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import FileTooLargeError, InvalidFileTypeError, StorageUploadError

logger = logging.getLogger(__name__)

# Storage bucket names
BUSINESS_IMAGES_BUCKET = "business-images"
PLATFORM_ASSETS_BUCKET = "platform-assets"

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".ico": "image/x-icon",
    ".svg": "image/svg+xml",
}


class StorageService:
    """
    Service for Supabase Storage operations.

    Validates, uploads and removes images and resolves their public URLs.
    """

    @staticmethod
    def validate_image(filename: str, size: int) -> str:
        """
        Check an upload against the allowed extensions and size limit.

        Args:
            filename: Original filename
            size: Content length in bytes

        Returns:
            The lowercased extension (e.g. ".png")

        Raises:
            InvalidFileTypeError: If the extension isn't allowed
            FileTooLargeError: If the file exceeds MAX_IMAGE_SIZE_MB
        """
        extension = PurePath(filename or "").suffix.lower()
        allowed = settings.allowed_image_extensions_list
        if extension not in allowed:
            raise InvalidFileTypeError(filename, allowed)

        if size > settings.max_image_size_bytes:
            raise FileTooLargeError(size / (1024 * 1024), settings.MAX_IMAGE_SIZE_MB)

        return extension

    @staticmethod
    def business_image_path(business_id: str, extension: str) -> str:
        """Storage path for a new listing photo."""
        return f"{business_id}/{int(time.time() * 1000)}{extension}"

    @staticmethod
    def platform_asset_path(kind: str, extension: str) -> str:
        """Storage path for a new logo/favicon."""
        return f"{kind}-{int(time.time() * 1000)}{extension}"

    @staticmethod
    def upload(bucket: str, path: str, content: bytes, extension: str) -> str:
        """
        Upload bytes to a bucket.

        Args:
            bucket: Bucket name
            path: Path inside the bucket
            content: File bytes
            extension: Extension used to pick the content type

        Returns:
            Storage path where file was uploaded

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()
        content_type = CONTENT_TYPES.get(extension, "application/octet-stream")

        try:
            client.storage.from_(bucket).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "true"}
            )

            logger.info(f"Uploaded file to storage: {bucket}/{path}")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def get_public_url(bucket: str, storage_path: str) -> str:
        """
        Get a public URL for a storage file.

        Both buckets are public, so the URL is stable and can be stored on
        the row that references it.
        """
        client = SupabaseClient.get_client()

        try:
            return client.storage.from_(bucket).get_public_url(storage_path)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise

    @staticmethod
    def upload_image(bucket: str, path_prefix: str | None, filename: str, content: bytes, kind: str = "asset") -> str:
        """
        Validate, upload and return the public URL of an image.

        Args:
            bucket: Target bucket
            path_prefix: Business ID for listing photos; None for platform assets
            filename: Original filename (for the extension)
            content: File bytes
            kind: Asset name used in the path when there is no prefix

        Returns:
            Public URL of the uploaded file
        """
        extension = StorageService.validate_image(filename, len(content))

        if path_prefix:
            path = StorageService.business_image_path(path_prefix, extension)
        else:
            path = StorageService.platform_asset_path(kind, extension)

        StorageService.upload(bucket, path, content, extension)
        return StorageService.get_public_url(bucket, path)

    @staticmethod
    def path_from_public_url(bucket: str, public_url: str) -> str | None:
        """
        Recover the storage path from a public URL in `bucket`.

        Returns None for URLs that don't point into the bucket (for example
        Google photo URLs on imported listings).
        """
        marker = f"/object/public/{bucket}/"
        if not public_url or marker not in public_url:
            return None
        return public_url.split(marker, 1)[1].split("?", 1)[0]

    @staticmethod
    def delete_file(bucket: str, storage_path: str) -> bool:
        """
        Delete a file from storage.

        Returns:
            True if deleted successfully
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).remove([storage_path])
            logger.info(f"Deleted file from storage: {bucket}/{storage_path}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete file: {e}")
            return False
