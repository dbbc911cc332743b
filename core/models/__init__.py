# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - business.py: Listing CRUD, hours/tags/amenities, admin moderation
# - category.py: Category schemas
# - lookup.py: Tags, amenities, Indian states
# - claim.py / transfer.py: Ownership claims and transfers
# - user.py: Profiles and roles
# - platform.py: Site-wide settings
# - contact.py: Contact form submissions
# - places.py: Google Places search/import/rescrape
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Listing Models
# -----------------------------------------------------------------------------
from .business import (
    AmenitiesUpdate,
    BusinessCreate,
    BusinessFilters,
    BusinessHourInput,
    BusinessImage,
    BusinessList,
    BusinessResponse,
    BusinessStatus,
    BusinessUpdate,
    DashboardStats,
    FeaturedUpdate,
    HoursUpdate,
    ImageCreate,
    PriceRange,
    StatusUpdate,
    TagsUpdate,
)

# -----------------------------------------------------------------------------
# Reference Data Models
# -----------------------------------------------------------------------------
from .category import CategoryCreate, CategoryResponse, CategoryUpdate
from .lookup import (
    AmenityCreate,
    AmenityResponse,
    AmenityUpdate,
    IndianState,
    TagCreate,
    TagResponse,
)

# -----------------------------------------------------------------------------
# Ownership Models - claims and transfers
# -----------------------------------------------------------------------------
from .claim import ClaimCreate, ClaimDecision, ClaimResponse, ClaimReview, ClaimStatus
from .transfer import TransferCreate, TransferRespond, TransferResponse, TransferStatus

# -----------------------------------------------------------------------------
# Account / Platform Models
# -----------------------------------------------------------------------------
from .user import AppRole, BlockUpdate, ProfileResponse
from .platform import AssetKind, MapsKeyResponse, PlatformSettingsResponse, PlatformSettingsUpdate
from .contact import ContactCreate, ContactSubmissionResponse

# -----------------------------------------------------------------------------
# Google Places Models
# -----------------------------------------------------------------------------
from .places import (
    ImportResult,
    PlaceCandidate,
    PlacePhoto,
    PlacesImportRequest,
    PlacesSearchRequest,
    PlacesSearchResponse,
    QueuedImportResponse,
    RescrapeRequest,
    RescrapeResponse,
)

__all__ = [
    # Listings
    "AmenitiesUpdate",
    "BusinessCreate",
    "BusinessFilters",
    "BusinessHourInput",
    "BusinessImage",
    "BusinessList",
    "BusinessResponse",
    "BusinessStatus",
    "BusinessUpdate",
    "DashboardStats",
    "FeaturedUpdate",
    "HoursUpdate",
    "ImageCreate",
    "PriceRange",
    "StatusUpdate",
    "TagsUpdate",
    # Reference data
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    "AmenityCreate",
    "AmenityResponse",
    "AmenityUpdate",
    "IndianState",
    "TagCreate",
    "TagResponse",
    # Ownership
    "ClaimCreate",
    "ClaimDecision",
    "ClaimResponse",
    "ClaimReview",
    "ClaimStatus",
    "TransferCreate",
    "TransferRespond",
    "TransferResponse",
    "TransferStatus",
    # Accounts / platform
    "AppRole",
    "BlockUpdate",
    "ProfileResponse",
    "AssetKind",
    "MapsKeyResponse",
    "PlatformSettingsResponse",
    "PlatformSettingsUpdate",
    "ContactCreate",
    "ContactSubmissionResponse",
    # Places
    "ImportResult",
    "PlaceCandidate",
    "PlacePhoto",
    "PlacesImportRequest",
    "PlacesSearchRequest",
    "PlacesSearchResponse",
    "QueuedImportResponse",
    "RescrapeRequest",
    "RescrapeResponse",
]
