# =============================================================================
# core/services/import_service.py - Google Places Import and Rescrape
# =============================================================================
# Turns mapped Places candidates into listings:
# - import_candidates: insert selected candidates, skipping (name, city)
#   duplicates; imported listings are approved and owned by the admin
# - search_and_import: search + import in one go (used by the worker)
# - rescrape: refresh one listing from its best Places match
#
# Per-item failures are counted and logged; they never abort the batch.
# =============================================================================

import logging
from typing import Any, Callable
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid
from app.config import settings
from app.exceptions import BusinessNotFoundError
from core.models.business import BusinessStatus
from core.models.places import (
    ImportResult,
    PlaceCandidate,
    PlacesSearchRequest,
    RescrapeRequest,
    RescrapeResponse,
)
from core.services.business_service import BusinessService
from core.services.category_service import CategoryService
from core.services.places_service import PlacesClient

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class ImportService:
    """Service for bulk Places imports and single-listing rescrapes."""

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    @staticmethod
    def is_duplicate(name: str, city: str) -> bool:
        """Pre-insert existence check on (name, city)."""
        client = SupabaseClient.get_client()
        response = (
            client.table("businesses")
            .select("id")
            .eq("name", name)
            .eq("city", city)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    @staticmethod
    def candidate_row(candidate: PlaceCandidate, owner_id: str, category_id: str) -> dict[str, Any]:
        """Listing columns for an imported candidate."""
        row = {
            "name": candidate.name,
            "address": candidate.address,
            "city": candidate.city,
            "state": candidate.state,
            "pincode": candidate.pincode,
            "phone": candidate.phone or "N/A",
            "email": settings.IMPORT_PLACEHOLDER_EMAIL,
            "website": candidate.website,
            "google_maps_url": candidate.google_maps_url,
            "description": candidate.description,
            "price_range": candidate.price_range.value if candidate.price_range else None,
            "logo_url": candidate.logo_url,
            "category_id": category_id,
            "owner_id": owner_id,
            "status": BusinessStatus.APPROVED.value,
        }
        return {key: value for key, value in row.items() if value is not None}

    @staticmethod
    def _insert_photos(business_id: str, candidate: PlaceCandidate) -> None:
        if not candidate.photos:
            return
        client = SupabaseClient.get_client()
        client.table("business_images").insert([
            {"business_id": business_id, "image_url": photo.url, "is_primary": photo.is_primary}
            for photo in candidate.photos
        ]).execute()

    @staticmethod
    def import_candidates(
        candidates: list[PlaceCandidate],
        owner_id: UUID | str,
        category_id: UUID | str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ImportResult:
        """
        Insert candidates as approved listings owned by `owner_id`.

        Args:
            candidates: Mapped Places results
            owner_id: Importing admin
            category_id: Used for candidates that don't carry one
            on_progress: Called as (done, total, message)

        Returns:
            ImportResult with imported/duplicates/failed counters
        """
        owner_id_str = normalize_uuid(owner_id)
        result = ImportResult()
        client = SupabaseClient.get_client()
        total = len(candidates)

        for index, candidate in enumerate(candidates, start=1):
            candidate_category = candidate.category_id or category_id

            try:
                if not candidate_category:
                    raise ValueError("candidate has no category_id")

                if ImportService.is_duplicate(candidate.name, candidate.city):
                    result.duplicates += 1
                    logger.info(f"Skipping duplicate: {candidate.name} ({candidate.city})")
                    continue

                row = ImportService.candidate_row(candidate, owner_id_str, normalize_uuid(candidate_category))
                response = client.table("businesses").insert(row).execute()
                if not response.data:
                    raise Exception("Insert returned no data")

                business_id = response.data[0]["id"]
                result.imported += 1
                result.business_ids.append(str(business_id))

                # The listing exists from here on; missing hours or photos
                # don't turn it into a failure
                if candidate.hours:
                    try:
                        BusinessService.write_hours(business_id, candidate.hours)
                    except Exception as e:
                        logger.warning(f"Imported '{candidate.name}' without hours: {e}")
                try:
                    ImportService._insert_photos(business_id, candidate)
                except Exception as e:
                    logger.warning(f"Imported '{candidate.name}' without photos: {e}")

            except Exception as e:
                result.failed += 1
                logger.error(f"Failed to import '{candidate.name}': {e}")

            finally:
                if on_progress:
                    on_progress(index, total, f"Imported {result.imported} of {total}")

        logger.info(
            f"Import finished: {result.imported} imported, "
            f"{result.duplicates} duplicates, {result.failed} failed"
        )
        return result

    @staticmethod
    def search(request: PlacesSearchRequest, places: PlacesClient, on_progress: ProgressCallback | None = None) -> list[PlaceCandidate]:
        """Run a Places search for a category in a city."""
        term = request.category or CategoryService.get_by_id(request.category_id)["name"]
        return places.search(
            term,
            request.city,
            max_results=request.max_results,
            category_id=request.category_id,
            on_progress=on_progress,
        )

    @staticmethod
    def search_and_import(
        request: PlacesSearchRequest,
        owner_id: UUID | str,
        places: PlacesClient | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ImportResult:
        """Search Google and import everything found."""
        client = places or PlacesClient()

        try:
            candidates = ImportService.search(request, client, on_progress=on_progress)
        finally:
            if places is None:
                client.close()

        return ImportService.import_candidates(
            candidates, owner_id, category_id=request.category_id, on_progress=on_progress
        )

    # -------------------------------------------------------------------------
    # Rescrape
    # -------------------------------------------------------------------------

    @staticmethod
    def rescrape(
        request: RescrapeRequest,
        places: PlacesClient | None = None,
    ) -> RescrapeResponse:
        """
        Look a listing up on Google and optionally write the result back.

        Name and city default to the stored listing when business_id is given.
        Applying overwrites address, contact and description fields, replaces
        the weekly hours and adds photos not already attached.
        """
        business = None
        if request.business_id:
            business = SupabaseClient.fetch_business(request.business_id)
            if not business:
                raise BusinessNotFoundError(str(request.business_id))

        name = request.business_name or business["name"]
        city = request.city or business["city"]

        client = places or PlacesClient()
        try:
            candidate = client.find_place(name, city)
        finally:
            if places is None:
                client.close()

        if candidate is None:
            return RescrapeResponse(success=False, error="Business not found on Google")

        if not request.apply:
            return RescrapeResponse(success=True, business=candidate)

        updated = ImportService.apply_rescrape(business, candidate)
        return RescrapeResponse(success=True, business=candidate, applied=True, updated=updated)

    @staticmethod
    def apply_rescrape(business: dict[str, Any], candidate: PlaceCandidate) -> dict[str, Any]:
        """Write scraped fields, hours and new photos onto an existing listing."""
        business_id = business["id"]
        data = {
            "address": candidate.address or None,
            "city": candidate.city,
            "state": candidate.state,
            "pincode": candidate.pincode,
            "phone": candidate.phone or None,
            "website": candidate.website,
            "google_maps_url": candidate.google_maps_url,
            "description": candidate.description,
            "price_range": candidate.price_range.value if candidate.price_range else None,
            "logo_url": candidate.logo_url,
        }
        data = {key: value for key, value in data.items() if value is not None}

        client = SupabaseClient.get_client()

        try:
            response = client.table("businesses").update(data).eq("id", business_id).execute()
            updated = response.data[0] if response.data else {**business, **data}

            if candidate.hours:
                BusinessService.write_hours(business_id, candidate.hours)

            existing = (
                client.table("business_images")
                .select("image_url")
                .eq("business_id", business_id)
                .execute()
            ).data or []
            known = {row["image_url"] for row in existing}
            new_photos = [photo for photo in candidate.photos if photo.url not in known]
            if new_photos:
                client.table("business_images").insert([
                    # Keep an existing primary image
                    {"business_id": business_id, "image_url": photo.url, "is_primary": photo.is_primary and not existing}
                    for photo in new_photos
                ]).execute()

            logger.info(f"Rescraped business {business_id}: {sorted(data)}, {len(new_photos)} new photos")
            return updated

        except Exception as e:
            logger.error(f"Failed to apply rescrape to business {business_id}: {e}")
            raise
