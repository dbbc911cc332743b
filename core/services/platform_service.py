# =============================================================================
# core/services/platform_service.py - Platform Settings
# =============================================================================
# platform_settings holds one row. Reads fall back to defaults when the row
# is missing; writes require it to exist.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.platform import AssetKind, PlatformSettingsResponse, PlatformSettingsUpdate
from core.services.storage_service import PLATFORM_ASSETS_BUCKET, StorageService
from app.exceptions import PlatformSettingsMissingError

logger = logging.getLogger(__name__)

SETTINGS_TABLE = "platform_settings"


class PlatformService:
    """Service for site-wide settings and branding assets."""

    @staticmethod
    def _fetch_row() -> dict[str, Any] | None:
        client = SupabaseClient.get_client()

        try:
            response = client.table(SETTINGS_TABLE).select("*").limit(1).execute()
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            logger.error(f"Failed to fetch platform settings: {e}")
            raise

    @staticmethod
    def get_settings() -> dict[str, Any]:
        """The settings row, or defaults when none exists yet."""
        row = PlatformService._fetch_row()
        if row is None:
            return PlatformSettingsResponse().model_dump(mode="json")
        return row

    @staticmethod
    def _write(data: dict[str, Any]) -> dict[str, Any]:
        row = PlatformService._fetch_row()
        if row is None:
            raise PlatformSettingsMissingError()

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(SETTINGS_TABLE)
                .update(data)
                .eq("id", row["id"])
                .execute()
            )
            logger.info(f"Updated platform settings: {sorted(data)}")
            return response.data[0] if response.data else {**row, **data}

        except Exception as e:
            logger.error(f"Failed to update platform settings: {e}")
            raise

    @staticmethod
    def update_settings(payload: PlatformSettingsUpdate) -> dict[str, Any]:
        """
        Update the settings row with the provided fields.

        Raises:
            PlatformSettingsMissingError: If the row doesn't exist
        """
        data = payload.model_dump(mode="json", exclude_unset=True)
        if not data:
            return PlatformService.get_settings()
        return PlatformService._write(data)

    @staticmethod
    def upload_asset(kind: AssetKind, filename: str, content: bytes) -> dict[str, Any]:
        """Upload a logo/favicon to platform-assets and store its public URL."""
        if PlatformService._fetch_row() is None:
            raise PlatformSettingsMissingError()

        public_url = StorageService.upload_image(
            PLATFORM_ASSETS_BUCKET, None, filename, content, kind=kind.value
        )
        return PlatformService._write({kind.column: public_url})

    @staticmethod
    def clear_asset(kind: AssetKind) -> dict[str, Any]:
        """Remove a logo/favicon URL (and its file when it lives in our bucket)."""
        row = PlatformService._fetch_row()
        if row is None:
            raise PlatformSettingsMissingError()

        storage_path = StorageService.path_from_public_url(PLATFORM_ASSETS_BUCKET, row.get(kind.column) or "")
        updated = PlatformService._write({kind.column: None})
        if storage_path:
            StorageService.delete_file(PLATFORM_ASSETS_BUCKET, storage_path)
        return updated
