# =============================================================================
# core/models/places.py - Google Places Import Schemas
# =============================================================================
# Admins search Google Places for "{category} in {city}", review the mapped
# candidates, then import the ones they select. A single listing can also be
# re-scraped to refresh its details from Google.
#
# PlaceCandidate is the mapped form of one Places result: it carries exactly
# the columns a listing needs plus photos and hours for the related tables.
# =============================================================================

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from .business import BusinessHourInput, PriceRange


class PlacePhoto(BaseModel):
    """A photo URL built from a Places photo_reference."""

    photo_reference: str
    url: str
    is_primary: bool = False


class PlaceCandidate(BaseModel):
    """
    A Places result mapped onto listing columns.

    Example:
        {
            "name": "Honest Restaurant",
            "address": "CG Road, Navrangpura, Ahmedabad, Gujarat 380009, India",
            "city": "Ahmedabad",
            "state": "Gujarat",
            "pincode": "380009",
            "phone": "079 2656 0000",
            "price_range": "budget",
            "photos": [{"photo_reference": "Aap_...", "url": "https://...", "is_primary": true}]
        }
    """

    name: str
    address: str = ""
    city: str
    state: str
    pincode: str | None = None
    phone: str = ""
    website: str | None = None
    google_maps_url: str | None = None
    category_id: UUID | None = None
    place_id: str | None = None
    description: str | None = None
    price_range: PriceRange | None = None
    rating: float | None = None
    rating_count: int | None = None
    business_status: str | None = None
    logo_url: str | None = None
    photos: list[PlacePhoto] = Field(default_factory=list)
    hours: list[BusinessHourInput] | None = None
    weekday_text: list[str] | None = None


class PlacesSearchRequest(BaseModel):
    """
    Search Google Places for one category in one city.

    `category` is the search term; it defaults to the name of `category_id`.
    """

    city: str = Field(..., min_length=2, max_length=100)
    category_id: UUID
    category: str | None = Field(default=None, max_length=100)
    max_results: int = Field(default=60, ge=1, le=60)


class PlacesSearchResponse(BaseModel):
    """Candidates found by a search."""

    businesses: list[PlaceCandidate] = Field(default_factory=list)
    total: int = 0
    message: str = ""


class PlacesImportRequest(BaseModel):
    """
    Import listings.

    Either pass reviewed `candidates`, or pass `search` to search and import
    everything found in one go. `background=True` runs the search-and-import
    on the Celery worker and returns a task ID.
    """

    candidates: list[PlaceCandidate] = Field(default_factory=list)
    search: PlacesSearchRequest | None = None
    background: bool = False

    @model_validator(mode="after")
    def require_source(self) -> "PlacesImportRequest":
        if not self.candidates and self.search is None:
            raise ValueError("Provide candidates to import or a search to run")
        if self.background and self.search is None:
            raise ValueError("Background imports need a search")
        return self


class ImportResult(BaseModel):
    """Per-batch import counters."""

    imported: int = 0
    duplicates: int = 0
    failed: int = 0
    business_ids: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.imported + self.duplicates + self.failed


class QueuedImportResponse(BaseModel):
    """Returned when an import was queued on the worker."""

    task_id: str
    status: str = "queued"
    message: str


class RescrapeRequest(BaseModel):
    """
    Refresh one listing from Google.

    With `business_id`, name and city default to the stored listing and
    `apply=True` writes the scraped data back onto it.
    """

    business_id: UUID | None = None
    business_name: str | None = Field(default=None, min_length=1, max_length=200)
    city: str | None = Field(default=None, min_length=2, max_length=100)
    apply: bool = False

    @model_validator(mode="after")
    def require_target(self) -> "RescrapeRequest":
        if self.business_id is None and not (self.business_name and self.city):
            raise ValueError("Provide business_id, or business_name and city")
        if self.apply and self.business_id is None:
            raise ValueError("apply=true needs a business_id to update")
        return self


class RescrapeResponse(BaseModel):
    """Result of a rescrape; `business` is None when Google had no match."""

    success: bool
    business: PlaceCandidate | None = None
    applied: bool = False
    error: str | None = None
    updated: dict[str, Any] | None = None
