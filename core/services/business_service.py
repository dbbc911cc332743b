# =============================================================================
# core/services/business_service.py - Listing Business Logic
# =============================================================================
# Handles listing CRUD, related rows (hours, tags, amenities, images) and
# admin moderation. Separates HTTP concerns from database/business logic.
#
# The Supabase client uses the service_role key, so ownership and
# visibility rules are enforced here rather than by RLS.
# =============================================================================

import logging
import re
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import is_uuid, normalize_uuid
from core.models.business import (
    BusinessCreate,
    BusinessFilters,
    BusinessHourInput,
    BusinessStatus,
    BusinessUpdate,
)
from core.services.storage_service import BUSINESS_IMAGES_BUCKET, StorageService
from app.exceptions import (
    BusinessNotApprovedError,
    BusinessNotFoundError,
    ImageNotFoundError,
    NotBusinessOwnerError,
)

logger = logging.getLogger(__name__)

# Embeds used by list and detail queries
BUSINESS_COLUMNS = "*, category:categories(*), images:business_images(*)"

# Columns an edit may not null out
REQUIRED_COLUMNS = ("name", "category_id", "address", "city", "state", "phone", "email")

# Characters that would break a PostgREST or_() filter string
_FILTER_UNSAFE = re.compile(r"[,()]")


class BusinessService:
    """
    Service for listing operations.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Browse / Search
    # -------------------------------------------------------------------------

    @staticmethod
    def list_businesses(
        filters: BusinessFilters | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List listings matching `filters`, newest first.

        Args:
            filters: Optional filters (see BusinessFilters)
            page: Page number (1-indexed)
            page_size: Items per page

        Returns:
            Tuple of (businesses list, total count)
        """
        filters = filters or BusinessFilters()
        client = SupabaseClient.get_client()

        category_id = filters.category_id
        if filters.category_slug and not category_id:
            category = SupabaseClient.fetch_one("categories", "slug", filters.category_slug, columns="id")
            if not category:
                # Unknown category slug matches nothing
                return [], 0
            category_id = category["id"]

        query = client.table("businesses").select(BUSINESS_COLUMNS, count="exact")

        if category_id:
            query = query.eq("category_id", normalize_uuid(category_id))
        if filters.status:
            query = query.eq("status", filters.status.value)
        if filters.owner_id:
            query = query.eq("owner_id", normalize_uuid(filters.owner_id))
        if filters.state:
            query = query.eq("state", filters.state)
        if filters.featured is not None:
            query = query.eq("is_featured", filters.featured)
        if filters.city:
            query = query.ilike("city", f"%{filters.city.strip()}%")
        if filters.search:
            term = _FILTER_UNSAFE.sub(" ", filters.search).strip()
            if term:
                query = query.or_(f"name.ilike.%{term}%,description.ilike.%{term}%")

        # Add pagination
        offset = (page - 1) * page_size
        query = query.order("created_at", desc=True).range(offset, offset + page_size - 1)

        try:
            response = query.execute()
            return response.data or [], response.count or 0

        except Exception as e:
            logger.error(f"Failed to list businesses: {e}")
            raise

    @staticmethod
    def list_approved(
        filters: BusinessFilters | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[dict[str, Any]], int]:
        """Public listing: same as list_businesses but always approved only."""
        filters = (filters or BusinessFilters()).model_copy(
            update={"status": BusinessStatus.APPROVED, "owner_id": None}
        )
        return BusinessService.list_businesses(filters, page=page, page_size=page_size)

    @staticmethod
    def list_my_businesses(user_id: UUID | str) -> list[dict[str, Any]]:
        """All listings owned by `user_id`, any status, newest first."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("businesses")
                .select(BUSINESS_COLUMNS)
                .eq("owner_id", normalize_uuid(user_id))
                .order("created_at", desc=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to list businesses for owner {user_id}: {e}")
            raise

    # -------------------------------------------------------------------------
    # Detail
    # -------------------------------------------------------------------------

    @staticmethod
    def get_business(
        business_key: str,
        user_id: UUID | str | None = None,
        is_admin: bool = False,
    ) -> dict[str, Any]:
        """
        Get a listing by ID or slug, with tags, hours and amenities.

        UUID-shaped keys are looked up by id, everything else by slug.
        Listings that aren't approved are only returned to their owner or
        an admin; everyone else gets a not-found.

        Raises:
            BusinessNotFoundError: If absent or not visible to the caller
        """
        column = "id" if is_uuid(business_key) else "slug"
        business = SupabaseClient.fetch_one("businesses", column, business_key, columns=BUSINESS_COLUMNS)

        if not business:
            raise BusinessNotFoundError(business_key)

        if business.get("status") != BusinessStatus.APPROVED.value and not is_admin:
            if not user_id or str(business.get("owner_id")) != str(user_id):
                raise BusinessNotFoundError(business_key)

        business_id = business["id"]
        client = SupabaseClient.get_client()

        try:
            tags = (
                client.table("business_tag_assignments")
                .select("*, tag:business_tags(*)")
                .eq("business_id", business_id)
                .execute()
            )
            hours = (
                client.table("business_hours")
                .select("*")
                .eq("business_id", business_id)
                .order("day_of_week")
                .execute()
            )
            amenities = (
                client.table("business_amenity_assignments")
                .select("*, amenity:business_amenities(*)")
                .eq("business_id", business_id)
                .execute()
            )

        except Exception as e:
            logger.error(f"Failed to load details for business {business_id}: {e}")
            raise

        business["tags"] = tags.data or []
        business["hours"] = hours.data or []
        business["amenities"] = amenities.data or []
        return business

    @staticmethod
    def get_owned_business(
        business_id: UUID | str,
        user_id: UUID | str,
        is_admin: bool = False,
    ) -> dict[str, Any]:
        """
        Get a listing the caller may modify.

        Raises:
            BusinessNotFoundError: If the listing doesn't exist
            NotBusinessOwnerError: If the caller is neither owner nor admin
        """
        business_id_str = normalize_uuid(business_id)
        business = SupabaseClient.fetch_business(business_id_str)

        if not business:
            raise BusinessNotFoundError(business_id_str)

        if not is_admin and str(business.get("owner_id")) != str(user_id):
            raise NotBusinessOwnerError(business_id_str)

        return business

    # -------------------------------------------------------------------------
    # Create / Update / Delete
    # -------------------------------------------------------------------------

    @staticmethod
    def create_business(owner_id: UUID | str, payload: BusinessCreate) -> dict[str, Any]:
        """
        Submit a new listing for moderation.

        The slug is left to the database when not provided.

        Returns:
            Created business dict
        """
        client = SupabaseClient.get_client()

        data = payload.model_dump(mode="json", exclude_none=True)
        data["owner_id"] = normalize_uuid(owner_id)
        data["status"] = BusinessStatus.PENDING.value

        try:
            response = client.table("businesses").insert(data).execute()

            if response.data:
                business = response.data[0]
                logger.info(f"Created business: {business['id']} for owner: {owner_id}")
                return business

            raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Failed to create business: {e}")
            raise

    @staticmethod
    def update_business(
        business_id: UUID | str,
        user_id: UUID | str,
        payload: BusinessUpdate,
        is_admin: bool = False,
    ) -> dict[str, Any]:
        """
        Edit a listing.

        Only fields present in the payload are written. An edit by the owner
        sends the listing back to "pending" and clears any rejection reason.

        Raises:
            BusinessNotFoundError / NotBusinessOwnerError
        """
        business = BusinessService.get_owned_business(business_id, user_id, is_admin=is_admin)

        data = payload.model_dump(mode="json", exclude_unset=True)
        for column in REQUIRED_COLUMNS:
            if column in data and data[column] is None:
                del data[column]

        if str(business.get("owner_id")) == str(user_id):
            data["status"] = BusinessStatus.PENDING.value
            data["rejection_reason"] = None

        if not data:
            return business

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("businesses")
                .update(data)
                .eq("id", business["id"])
                .execute()
            )

            if response.data:
                logger.info(f"Updated business: {business['id']} (fields: {sorted(data)})")
                return response.data[0]

            return business

        except Exception as e:
            logger.error(f"Failed to update business {business['id']}: {e}")
            raise

    @staticmethod
    def delete_business(
        business_id: UUID | str,
        user_id: UUID | str,
        is_admin: bool = False,
    ) -> None:
        """Delete a listing (owner or admin). Related rows cascade in the database."""
        business = BusinessService.get_owned_business(business_id, user_id, is_admin=is_admin)
        client = SupabaseClient.get_client()

        try:
            client.table("businesses").delete().eq("id", business["id"]).execute()
            logger.info(f"Deleted business: {business['id']} by user: {user_id}")

        except Exception as e:
            logger.error(f"Failed to delete business {business['id']}: {e}")
            raise

    # -------------------------------------------------------------------------
    # Related Rows
    # -------------------------------------------------------------------------

    @staticmethod
    def replace_hours(
        business_id: UUID | str,
        user_id: UUID | str,
        hours: list[BusinessHourInput],
        is_admin: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Replace the weekly schedule.

        Always stores seven rows; days not provided are stored closed, and
        closed days never keep open/close/break times.
        """
        business = BusinessService.get_owned_business(business_id, user_id, is_admin=is_admin)
        return BusinessService.write_hours(business["id"], hours)

    @staticmethod
    def write_hours(business_id: str, hours: list[BusinessHourInput]) -> list[dict[str, Any]]:
        """Delete and re-insert all seven business_hours rows (no ownership check)."""
        by_day = {hour.day_of_week: hour for hour in hours}
        rows = []
        for day in range(7):
            hour = by_day.get(day) or BusinessHourInput(day_of_week=day, is_closed=True)
            row = hour.model_dump()
            if hour.is_closed:
                row.update(open_time=None, close_time=None, break_start=None, break_end=None)
            row["business_id"] = business_id
            rows.append(row)

        client = SupabaseClient.get_client()

        try:
            client.table("business_hours").delete().eq("business_id", business_id).execute()
            response = client.table("business_hours").insert(rows).execute()
            logger.info(f"Replaced hours for business: {business_id}")
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to replace hours for business {business_id}: {e}")
            raise

    @staticmethod
    def replace_tags(
        business_id: UUID | str,
        user_id: UUID | str,
        tag_ids: list[UUID],
        custom_tags: list[str],
        is_admin: bool = False,
    ) -> list[dict[str, Any]]:
        """Replace predefined and custom tag assignments."""
        business = BusinessService.get_owned_business(business_id, user_id, is_admin=is_admin)
        business_id_str = business["id"]

        rows = [{"business_id": business_id_str, "tag_id": str(tag_id)} for tag_id in dict.fromkeys(tag_ids)]
        rows += [{"business_id": business_id_str, "custom_tag": tag} for tag in custom_tags]

        client = SupabaseClient.get_client()

        try:
            client.table("business_tag_assignments").delete().eq("business_id", business_id_str).execute()
            if not rows:
                return []
            response = client.table("business_tag_assignments").insert(rows).execute()
            logger.info(f"Replaced {len(rows)} tags for business: {business_id_str}")
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to replace tags for business {business_id_str}: {e}")
            raise

    @staticmethod
    def replace_amenities(
        business_id: UUID | str,
        user_id: UUID | str,
        amenity_ids: list[UUID],
        is_admin: bool = False,
    ) -> list[dict[str, Any]]:
        """Replace amenity assignments."""
        business = BusinessService.get_owned_business(business_id, user_id, is_admin=is_admin)
        business_id_str = business["id"]

        rows = [
            {"business_id": business_id_str, "amenity_id": str(amenity_id)}
            for amenity_id in dict.fromkeys(amenity_ids)
        ]

        client = SupabaseClient.get_client()

        try:
            client.table("business_amenity_assignments").delete().eq("business_id", business_id_str).execute()
            if not rows:
                return []
            response = client.table("business_amenity_assignments").insert(rows).execute()
            logger.info(f"Replaced {len(rows)} amenities for business: {business_id_str}")
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to replace amenities for business {business_id_str}: {e}")
            raise

    @staticmethod
    def add_image(
        business_id: UUID | str,
        user_id: UUID | str,
        image_url: str,
        is_primary: bool = False,
        is_admin: bool = False,
    ) -> dict[str, Any]:
        """
        Attach an image URL to a listing.

        A new primary image demotes the previous one.
        """
        business = BusinessService.get_owned_business(business_id, user_id, is_admin=is_admin)
        business_id_str = business["id"]
        client = SupabaseClient.get_client()

        try:
            if is_primary:
                (
                    client.table("business_images")
                    .update({"is_primary": False})
                    .eq("business_id", business_id_str)
                    .execute()
                )

            response = (
                client.table("business_images")
                .insert({"business_id": business_id_str, "image_url": image_url, "is_primary": is_primary})
                .execute()
            )

            if response.data:
                image = response.data[0]
                logger.info(f"Added image {image['id']} to business: {business_id_str}")
                return image

            raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Failed to add image to business {business_id_str}: {e}")
            raise

    @staticmethod
    def upload_image(
        business_id: UUID | str,
        user_id: UUID | str,
        filename: str,
        content: bytes,
        is_primary: bool = False,
        is_admin: bool = False,
    ) -> dict[str, Any]:
        """Upload a photo to the business-images bucket and attach it."""
        business = BusinessService.get_owned_business(business_id, user_id, is_admin=is_admin)
        public_url = StorageService.upload_image(BUSINESS_IMAGES_BUCKET, business["id"], filename, content)
        return BusinessService.add_image(
            business["id"], user_id, public_url, is_primary=is_primary, is_admin=is_admin
        )

    @staticmethod
    def delete_image(
        business_id: UUID | str,
        image_id: UUID | str,
        user_id: UUID | str,
        is_admin: bool = False,
    ) -> None:
        """
        Remove an image row, and its file when it lives in our bucket.

        Raises:
            ImageNotFoundError: If the image isn't attached to this listing
        """
        business = BusinessService.get_owned_business(business_id, user_id, is_admin=is_admin)
        image_id_str = normalize_uuid(image_id)

        image = SupabaseClient.fetch_one("business_images", "id", image_id_str)
        if not image or str(image.get("business_id")) != str(business["id"]):
            raise ImageNotFoundError(image_id_str)

        client = SupabaseClient.get_client()

        try:
            client.table("business_images").delete().eq("id", image_id_str).execute()
            logger.info(f"Deleted image {image_id_str} from business: {business['id']}")

        except Exception as e:
            logger.error(f"Failed to delete image {image_id_str}: {e}")
            raise

        storage_path = StorageService.path_from_public_url(BUSINESS_IMAGES_BUCKET, image.get("image_url", ""))
        if storage_path:
            StorageService.delete_file(BUSINESS_IMAGES_BUCKET, storage_path)

    # -------------------------------------------------------------------------
    # Admin Moderation
    # -------------------------------------------------------------------------

    @staticmethod
    def update_status(
        business_id: UUID | str,
        status: BusinessStatus,
        rejection_reason: str | None = None,
    ) -> dict[str, Any]:
        """
        Set a listing's moderation status.

        rejection_reason is stored only for "rejected" and cleared otherwise.
        """
        business_id_str = normalize_uuid(business_id)
        if not SupabaseClient.fetch_business(business_id_str):
            raise BusinessNotFoundError(business_id_str)

        data = {
            "status": status.value,
            "rejection_reason": rejection_reason if status == BusinessStatus.REJECTED else None,
        }
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("businesses")
                .update(data)
                .eq("id", business_id_str)
                .execute()
            )
            logger.info(f"Business {business_id_str} status -> {status.value}")
            return response.data[0] if response.data else {"id": business_id_str, **data}

        except Exception as e:
            logger.error(f"Failed to update status for business {business_id_str}: {e}")
            raise

    @staticmethod
    def toggle_featured(business_id: UUID | str, is_featured: bool) -> dict[str, Any]:
        """
        Feature or unfeature a listing.

        Raises:
            BusinessNotApprovedError: When featuring a listing that isn't approved
        """
        business_id_str = normalize_uuid(business_id)
        business = SupabaseClient.fetch_business(business_id_str)
        if not business:
            raise BusinessNotFoundError(business_id_str)

        if is_featured and business.get("status") != BusinessStatus.APPROVED.value:
            raise BusinessNotApprovedError(business_id_str, business.get("status", "unknown"))

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("businesses")
                .update({"is_featured": is_featured})
                .eq("id", business_id_str)
                .execute()
            )
            logger.info(f"Business {business_id_str} featured={is_featured}")
            return response.data[0] if response.data else {**business, "is_featured": is_featured}

        except Exception as e:
            logger.error(f"Failed to toggle featured for business {business_id_str}: {e}")
            raise

    @staticmethod
    def dashboard_stats() -> dict[str, Any]:
        """Counters and the five newest listings for the admin dashboard."""
        count = SupabaseClient.count_rows
        stats = {
            "total_businesses": count("businesses"),
            "pending": count("businesses", {"status": BusinessStatus.PENDING.value}),
            "approved": count("businesses", {"status": BusinessStatus.APPROVED.value}),
            "rejected": count("businesses", {"status": BusinessStatus.REJECTED.value}),
            "featured": count("businesses", {"is_featured": True}),
            "total_users": count("profiles"),
            "pending_claims": count("business_claims", {"status": "pending"}),
            "unread_contact_submissions": count("contact_submissions", {"is_read": False}),
        }

        recent, _ = BusinessService.list_businesses(page=1, page_size=5)
        stats["recent_businesses"] = recent
        return stats
