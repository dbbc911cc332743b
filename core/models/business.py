# =============================================================================
# core/models/business.py - Business Listing Schemas
# =============================================================================
# These models define the API contract for listings:
# - BusinessCreate / BusinessUpdate: owner form input (validated)
# - BusinessResponse: a listing row with optional embeds
# - BusinessFilters: search/browse filters
# - BusinessHourInput / HoursUpdate / TagsUpdate / AmenitiesUpdate
# - StatusUpdate / FeaturedUpdate: admin moderation input
#
# A listing is created "pending" by its owner and moved to "approved" or
# "rejected" by an administrator. Any owner edit sends it back to "pending".
# =============================================================================

import re
from datetime import date, datetime
from enum import Enum
from typing import Any
from urllib.parse import urlparse
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from lib.utils import empty_to_none

from .category import CategoryResponse


PHONE_PATTERN = re.compile(r"^(\+91)?[6-9]\d{9}$")
PINCODE_PATTERN = re.compile(r"^\d{6}$")
SLUG_PATTERN = re.compile(r"^[a-z0-9-]*$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")

URL_FIELDS = (
    "website",
    "google_maps_url",
    "facebook_url",
    "instagram_url",
    "twitter_url",
    "youtube_url",
    "linkedin_url",
    "logo_url",
)
PHONE_FIELDS = ("phone", "whatsapp", "alternate_phone")


class BusinessStatus(str, Enum):
    """
    Moderation states for a listing.

    Flow: pending -> approved | rejected; an owner edit -> pending
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PriceRange(str, Enum):
    """Price bands shown on listings (mapped from Google price_level on import)."""
    BUDGET = "budget"
    MODERATE = "moderate"
    PREMIUM = "premium"
    LUXURY = "luxury"


def _check_url(value: str | None) -> str | None:
    if value is None:
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Please enter a valid URL")
    return value


# =============================================================================
# Owner Input
# =============================================================================

class _BusinessFields(BaseModel):
    """Validators shared by create and update payloads."""

    @model_validator(mode="before")
    @classmethod
    def blank_strings_to_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return empty_to_none(data)
        return data

    @field_validator(*URL_FIELDS, check_fields=False)
    @classmethod
    def validate_urls(cls, value: str | None) -> str | None:
        return _check_url(value)

    @field_validator(*PHONE_FIELDS, check_fields=False)
    @classmethod
    def validate_phones(cls, value: str | None) -> str | None:
        if value is None:
            return value
        compact = re.sub(r"[\s-]", "", value)
        if not PHONE_PATTERN.match(compact):
            raise ValueError("Please enter a valid Indian phone number")
        return compact

    @field_validator("pincode", check_fields=False)
    @classmethod
    def validate_pincode(cls, value: str | None) -> str | None:
        if value is not None and not PINCODE_PATTERN.match(value):
            raise ValueError("Please enter a valid 6-digit pincode")
        return value

    @field_validator("slug", check_fields=False)
    @classmethod
    def validate_slug(cls, value: str | None) -> str | None:
        if value is not None and not SLUG_PATTERN.match(value):
            raise ValueError("Slug can only contain lowercase letters, numbers, and hyphens")
        return value

    @field_validator("year_established", check_fields=False)
    @classmethod
    def validate_year(cls, value: int | None) -> int | None:
        if value is not None and not 1800 <= value <= date.today().year:
            raise ValueError(f"Year must be between 1800 and {date.today().year}")
        return value


class BusinessCreate(_BusinessFields):
    """
    Schema for submitting a new listing.

    The owner is taken from the auth token and the status is always
    "pending", so neither is accepted here.

    Example:
        {
            "name": "Sharma Sweets",
            "category_id": "0b5c...",
            "address": "12 MG Road, Navrangpura",
            "city": "Ahmedabad",
            "state": "Gujarat",
            "phone": "+919876543210",
            "email": "hello@sharmasweets.in"
        }
    """

    name: str = Field(..., min_length=2, max_length=200)
    slug: str | None = Field(
        default=None,
        max_length=200,
        description="Optional custom slug; generated by the database when omitted"
    )
    category_id: UUID
    short_description: str | None = Field(default=None, max_length=200)
    description: str | None = None
    address: str = Field(..., min_length=5)
    city: str = Field(..., min_length=2)
    state: str = Field(..., min_length=1)
    pincode: str | None = None
    google_maps_url: str | None = None
    phone: str
    email: EmailStr
    website: str | None = None
    whatsapp: str | None = None
    telegram: str | None = None
    alternate_phone: str | None = None
    alternate_email: EmailStr | None = None
    facebook_url: str | None = None
    instagram_url: str | None = None
    twitter_url: str | None = None
    youtube_url: str | None = None
    linkedin_url: str | None = None
    logo_url: str | None = None
    business_type: str | None = None
    price_range: PriceRange | None = None
    year_established: int | None = None


class BusinessUpdate(_BusinessFields):
    """
    Schema for editing a listing. Only provided fields are written.

    Saving an edit sends the listing back to moderation.
    """

    name: str | None = Field(default=None, min_length=2, max_length=200)
    slug: str | None = Field(default=None, max_length=200)
    category_id: UUID | None = None
    short_description: str | None = Field(default=None, max_length=200)
    description: str | None = None
    address: str | None = Field(default=None, min_length=5)
    city: str | None = Field(default=None, min_length=2)
    state: str | None = Field(default=None, min_length=1)
    pincode: str | None = None
    google_maps_url: str | None = None
    phone: str | None = None
    email: EmailStr | None = None
    website: str | None = None
    whatsapp: str | None = None
    telegram: str | None = None
    alternate_phone: str | None = None
    alternate_email: EmailStr | None = None
    facebook_url: str | None = None
    instagram_url: str | None = None
    twitter_url: str | None = None
    youtube_url: str | None = None
    linkedin_url: str | None = None
    logo_url: str | None = None
    business_type: str | None = None
    price_range: PriceRange | None = None
    year_established: int | None = None


# =============================================================================
# Related Rows (hours, tags, amenities, images)
# =============================================================================

class BusinessHourInput(BaseModel):
    """
    Opening hours for one day of the week.

    day_of_week: 0 = Sunday ... 6 = Saturday. Times are "HH:MM".
    """

    day_of_week: int = Field(..., ge=0, le=6)
    is_closed: bool = False
    open_time: str | None = None
    close_time: str | None = None
    break_start: str | None = None
    break_end: str | None = None

    @field_validator("open_time", "close_time", "break_start", "break_end", mode="before")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        if value in (None, ""):
            return None
        if not TIME_PATTERN.match(value):
            raise ValueError("Times must be HH:MM (24-hour)")
        return value[:5]


class HoursUpdate(BaseModel):
    """Full weekly schedule; replaces every stored row."""

    hours: list[BusinessHourInput] = Field(..., max_length=7)

    @field_validator("hours")
    @classmethod
    def unique_days(cls, value: list[BusinessHourInput]) -> list[BusinessHourInput]:
        days = [hour.day_of_week for hour in value]
        if len(days) != len(set(days)):
            raise ValueError("Each day_of_week may appear only once")
        return value


class TagsUpdate(BaseModel):
    """Predefined tag IDs plus free-text custom tags."""

    tag_ids: list[UUID] = Field(default_factory=list)
    custom_tags: list[str] = Field(default_factory=list)

    @field_validator("custom_tags")
    @classmethod
    def clean_custom_tags(cls, value: list[str]) -> list[str]:
        cleaned: list[str] = []
        for tag in value:
            tag = tag.strip()
            if tag and tag not in cleaned:
                cleaned.append(tag)
        return cleaned


class AmenitiesUpdate(BaseModel):
    """Amenity IDs assigned to a listing."""

    amenity_ids: list[UUID] = Field(default_factory=list)


class ImageCreate(BaseModel):
    """Attach an image by URL."""

    image_url: str
    is_primary: bool = False

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value: str) -> str:
        return _check_url(value)


class BusinessImage(BaseModel):
    """A stored listing image."""
    model_config = ConfigDict(extra="ignore")

    id: UUID
    business_id: UUID
    image_url: str
    is_primary: bool | None = False
    created_at: datetime | None = None


# =============================================================================
# Responses
# =============================================================================

class BusinessResponse(BaseModel):
    """
    Schema for returning a listing.

    The detail endpoint adds tags, hours and amenities; list endpoints
    embed only the category and images.
    """
    model_config = ConfigDict(extra="ignore", from_attributes=True)

    id: UUID
    owner_id: UUID
    name: str
    slug: str | None = None
    category_id: UUID
    short_description: str | None = None
    description: str | None = None
    address: str
    city: str
    state: str
    pincode: str | None = None
    phone: str
    email: str
    website: str | None = None
    whatsapp: str | None = None
    telegram: str | None = None
    alternate_phone: str | None = None
    alternate_email: str | None = None
    facebook_url: str | None = None
    instagram_url: str | None = None
    twitter_url: str | None = None
    youtube_url: str | None = None
    linkedin_url: str | None = None
    google_maps_url: str | None = None
    logo_url: str | None = None
    business_type: str | None = None
    price_range: str | None = None
    year_established: int | None = None
    status: BusinessStatus
    rejection_reason: str | None = None
    is_featured: bool | None = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    category: CategoryResponse | None = None
    images: list[BusinessImage] = Field(default_factory=list)
    tags: list[dict[str, Any]] | None = None
    hours: list[dict[str, Any]] | None = None
    amenities: list[dict[str, Any]] | None = None


class BusinessList(BaseModel):
    """Paginated list of listings."""

    businesses: list[BusinessResponse] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class BusinessFilters(BaseModel):
    """
    Browse/search filters.

    Text filters are substring matches (ILIKE), not ranked search.
    """

    category_id: UUID | None = None
    category_slug: str | None = None
    city: str | None = None
    state: str | None = None
    search: str | None = None
    status: BusinessStatus | None = None
    owner_id: UUID | None = None
    featured: bool | None = None


# =============================================================================
# Admin Input
# =============================================================================

class StatusUpdate(BaseModel):
    """Admin moderation decision."""

    status: BusinessStatus
    rejection_reason: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def reason_required_for_rejection(self) -> "StatusUpdate":
        if self.status == BusinessStatus.REJECTED:
            if not self.rejection_reason or not self.rejection_reason.strip():
                raise ValueError("A rejection reason is required when rejecting a business")
        else:
            self.rejection_reason = None
        return self


class FeaturedUpdate(BaseModel):
    """Toggle whether an approved listing is featured on the homepage."""

    is_featured: bool


class DashboardStats(BaseModel):
    """Admin dashboard counters."""

    total_businesses: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    featured: int = 0
    total_users: int = 0
    pending_claims: int = 0
    unread_contact_submissions: int = 0
    recent_businesses: list[BusinessResponse] = Field(default_factory=list)
