# =============================================================================
# core/services/lookup_service.py - Tags, Amenities and States
# =============================================================================
# Reference tables used by the listing form. Tags and amenities are managed
# by admins; Indian states are read-only.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, slugify
from core.models.lookup import AmenityCreate, AmenityUpdate, TagCreate
from app.exceptions import AmenityNotFoundError, TagNotFoundError

logger = logging.getLogger(__name__)

TAGS_TABLE = "business_tags"
AMENITIES_TABLE = "business_amenities"
STATES_TABLE = "indian_states"


def _list_by_name(table: str) -> list[dict[str, Any]]:
    client = SupabaseClient.get_client()

    try:
        response = client.table(table).select("*").order("name").execute()
        return response.data or []

    except Exception as e:
        logger.error(f"Failed to list {table}: {e}")
        raise


def _insert(table: str, data: dict[str, Any]) -> dict[str, Any]:
    client = SupabaseClient.get_client()

    try:
        response = client.table(table).insert(data).execute()

        if response.data:
            row = response.data[0]
            logger.info(f"Created {table} row: {row['id']} ({data.get('slug')})")
            return row

        raise Exception("Insert returned no data")

    except Exception as e:
        logger.error(f"Failed to insert into {table}: {e}")
        raise


def _update(table: str, row: dict[str, Any], data: dict[str, Any]) -> dict[str, Any]:
    client = SupabaseClient.get_client()

    try:
        response = client.table(table).update(data).eq("id", row["id"]).execute()
        logger.info(f"Updated {table} row: {row['id']}")
        return response.data[0] if response.data else {**row, **data}

    except Exception as e:
        logger.error(f"Failed to update {table} row {row['id']}: {e}")
        raise


def _delete(table: str, row_id: str) -> None:
    client = SupabaseClient.get_client()

    try:
        client.table(table).delete().eq("id", row_id).execute()
        logger.info(f"Deleted {table} row: {row_id}")

    except Exception as e:
        logger.error(f"Failed to delete {table} row {row_id}: {e}")
        raise


class LookupService:
    """Service for tags, amenities and states."""

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    @staticmethod
    def list_tags() -> list[dict[str, Any]]:
        return _list_by_name(TAGS_TABLE)

    @staticmethod
    def get_tag(tag_id: UUID | str) -> dict[str, Any]:
        tag_id_str = normalize_uuid(tag_id)
        tag = SupabaseClient.fetch_one(TAGS_TABLE, "id", tag_id_str)
        if not tag:
            raise TagNotFoundError(tag_id_str)
        return tag

    @staticmethod
    def create_tag(payload: TagCreate) -> dict[str, Any]:
        name = payload.name.strip()
        return _insert(TAGS_TABLE, {"name": name, "slug": slugify(name)})

    @staticmethod
    def update_tag(tag_id: UUID | str, payload: TagCreate) -> dict[str, Any]:
        tag = LookupService.get_tag(tag_id)
        name = payload.name.strip()
        return _update(TAGS_TABLE, tag, {"name": name, "slug": slugify(name)})

    @staticmethod
    def delete_tag(tag_id: UUID | str) -> None:
        tag = LookupService.get_tag(tag_id)
        _delete(TAGS_TABLE, tag["id"])

    # -------------------------------------------------------------------------
    # Amenities
    # -------------------------------------------------------------------------

    @staticmethod
    def list_amenities() -> list[dict[str, Any]]:
        return _list_by_name(AMENITIES_TABLE)

    @staticmethod
    def get_amenity(amenity_id: UUID | str) -> dict[str, Any]:
        amenity_id_str = normalize_uuid(amenity_id)
        amenity = SupabaseClient.fetch_one(AMENITIES_TABLE, "id", amenity_id_str)
        if not amenity:
            raise AmenityNotFoundError(amenity_id_str)
        return amenity

    @staticmethod
    def create_amenity(payload: AmenityCreate) -> dict[str, Any]:
        """Create an amenity; the slug comes from the name."""
        name = payload.name.strip()
        return _insert(AMENITIES_TABLE, {"name": name, "slug": slugify(name), "icon": payload.icon})

    @staticmethod
    def update_amenity(amenity_id: UUID | str, payload: AmenityUpdate) -> dict[str, Any]:
        """Edit an amenity; renaming regenerates the slug."""
        amenity = LookupService.get_amenity(amenity_id)

        data = payload.model_dump(exclude_unset=True)
        if data.get("name"):
            data["name"] = data["name"].strip()
            data["slug"] = slugify(data["name"])
        elif "name" in data:
            del data["name"]

        if not data:
            return amenity
        return _update(AMENITIES_TABLE, amenity, data)

    @staticmethod
    def delete_amenity(amenity_id: UUID | str) -> None:
        amenity = LookupService.get_amenity(amenity_id)
        _delete(AMENITIES_TABLE, amenity["id"])

    # -------------------------------------------------------------------------
    # States
    # -------------------------------------------------------------------------

    @staticmethod
    def list_states() -> list[dict[str, Any]]:
        """Indian states and union territories, by name."""
        return _list_by_name(STATES_TABLE)
