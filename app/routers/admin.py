# =============================================================================
# app/routers/admin.py - Admin Endpoints
# =============================================================================
# Moderation, user management, reference data, contact inbox, platform
# settings and Google Places imports.
#
# Every route here requires the "admin" role (see get_current_admin).
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status
from pydantic import BaseModel, Field

from app.auth import AuthUser, get_current_admin
from core.models.business import (
    BusinessFilters,
    BusinessList,
    BusinessResponse,
    BusinessStatus,
    DashboardStats,
    FeaturedUpdate,
    StatusUpdate,
)
from core.models.category import CategoryCreate, CategoryResponse, CategoryUpdate
from core.models.claim import ClaimResponse, ClaimReview, ClaimStatus
from core.models.contact import ContactSubmissionResponse
from core.models.lookup import (
    AmenityCreate,
    AmenityResponse,
    AmenityUpdate,
    TagCreate,
    TagResponse,
)
from core.models.places import (
    ImportResult,
    PlacesImportRequest,
    PlacesSearchRequest,
    PlacesSearchResponse,
    QueuedImportResponse,
    RescrapeRequest,
    RescrapeResponse,
)
from core.models.platform import AssetKind, PlatformSettingsResponse, PlatformSettingsUpdate
from core.models.user import BlockUpdate, ProfileResponse
from core.services.business_service import BusinessService
from core.services.category_service import CategoryService
from core.services.claim_service import ClaimService
from core.services.contact_service import ContactService
from core.services.import_service import ImportService
from core.services.lookup_service import LookupService
from core.services.places_service import PlacesClient
from core.services.platform_service import PlatformService
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_admin)])


# =============================================================================
# Response Models
# =============================================================================

class ContactSubmissionList(BaseModel):
    """Paginated contact inbox."""
    submissions: list[ContactSubmissionResponse] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 50


class ReadUpdate(BaseModel):
    """Mark a submission read or unread."""
    is_read: bool = True


# =============================================================================
# Dashboard
# =============================================================================

@router.get("/dashboard", response_model=DashboardStats)
async def dashboard():
    """Moderation counters and the newest listings."""
    return BusinessService.dashboard_stats()


# =============================================================================
# Listings
# =============================================================================

@router.get("/businesses", response_model=BusinessList)
async def list_all_businesses(
    status_filter: Annotated[BusinessStatus | None, Query(alias="status")] = None,
    category_id: Annotated[UUID | None, Query()] = None,
    city: Annotated[str | None, Query()] = None,
    search: Annotated[str | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
):
    """Listings in any status, newest first."""
    filters = BusinessFilters(status=status_filter, category_id=category_id, city=city, search=search)
    businesses, total = BusinessService.list_businesses(filters, page=page, page_size=page_size)
    return BusinessList(businesses=businesses, total=total, page=page, page_size=page_size)


@router.patch("/businesses/{business_id}/status", response_model=BusinessResponse)
async def update_business_status(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    payload: StatusUpdate,
):
    """Approve, reject or re-queue a listing."""
    return BusinessService.update_status(business_id, payload.status, payload.rejection_reason)


@router.patch("/businesses/{business_id}/featured", response_model=BusinessResponse)
async def update_business_featured(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    payload: FeaturedUpdate,
):
    """Feature or unfeature an approved listing."""
    return BusinessService.toggle_featured(business_id, payload.is_featured)


# =============================================================================
# Users
# =============================================================================

@router.get("/users", response_model=list[ProfileResponse])
async def list_users():
    """All profiles with their roles."""
    return UserService.list_users()


@router.patch("/users/{user_id}/block", response_model=ProfileResponse)
async def set_user_blocked(
    user_id: Annotated[UUID, Path(description="User UUID")],
    payload: BlockUpdate,
    admin: AuthUser = Depends(get_current_admin),
):
    """Block or unblock an account. Admins can't block themselves."""
    return UserService.set_blocked(admin.id, user_id, payload.is_blocked)


# =============================================================================
# Claims
# =============================================================================

@router.get("/claims", response_model=list[ClaimResponse])
async def list_claims(
    status_filter: Annotated[ClaimStatus | None, Query(alias="status")] = None,
):
    """Claims with listing and claimant details, newest first."""
    return ClaimService.list_all_claims(status_filter)


@router.post("/claims/{claim_id}/review", response_model=ClaimResponse)
async def review_claim(
    claim_id: Annotated[UUID, Path(description="Claim UUID")],
    payload: ClaimReview,
):
    """
    Approve or reject a pending claim.

    Approval makes the claimant the listing's owner.
    """
    return ClaimService.review_claim(claim_id, payload.status, payload.admin_notes)


# =============================================================================
# Categories
# =============================================================================

@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(payload: CategoryCreate):
    return CategoryService.create_category(payload)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: Annotated[UUID, Path(description="Category UUID")],
    payload: CategoryUpdate,
):
    """Edit a category. Renaming regenerates the slug."""
    return CategoryService.update_category(category_id, payload)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: Annotated[UUID, Path(description="Category UUID")],
):
    CategoryService.delete_category(category_id)


# =============================================================================
# Tags / Amenities
# =============================================================================

@router.post("/tags", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(payload: TagCreate):
    return LookupService.create_tag(payload)


@router.patch("/tags/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: Annotated[UUID, Path(description="Tag UUID")],
    payload: TagCreate,
):
    return LookupService.update_tag(tag_id, payload)


@router.delete("/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: Annotated[UUID, Path(description="Tag UUID")],
):
    LookupService.delete_tag(tag_id)


@router.post("/amenities", response_model=AmenityResponse, status_code=status.HTTP_201_CREATED)
async def create_amenity(payload: AmenityCreate):
    return LookupService.create_amenity(payload)


@router.patch("/amenities/{amenity_id}", response_model=AmenityResponse)
async def update_amenity(
    amenity_id: Annotated[UUID, Path(description="Amenity UUID")],
    payload: AmenityUpdate,
):
    return LookupService.update_amenity(amenity_id, payload)


@router.delete("/amenities/{amenity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_amenity(
    amenity_id: Annotated[UUID, Path(description="Amenity UUID")],
):
    LookupService.delete_amenity(amenity_id)


# =============================================================================
# Contact Inbox
# =============================================================================

@router.get("/contact-submissions", response_model=ContactSubmissionList)
async def list_contact_submissions(
    unread_only: Annotated[bool, Query()] = False,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 50,
):
    """Contact form messages, newest first."""
    submissions, total = ContactService.list_submissions(unread_only=unread_only, page=page, page_size=page_size)
    return ContactSubmissionList(submissions=submissions, total=total, page=page, page_size=page_size)


@router.patch("/contact-submissions/{submission_id}", response_model=ContactSubmissionResponse)
async def mark_contact_submission(
    submission_id: Annotated[UUID, Path(description="Submission UUID")],
    payload: ReadUpdate,
):
    return ContactService.mark_read(submission_id, payload.is_read)


@router.delete("/contact-submissions/{submission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact_submission(
    submission_id: Annotated[UUID, Path(description="Submission UUID")],
):
    ContactService.delete_submission(submission_id)


# =============================================================================
# Platform Settings
# =============================================================================

@router.patch("/settings", response_model=PlatformSettingsResponse)
async def update_platform_settings(payload: PlatformSettingsUpdate):
    """Update branding, contact details and SEO defaults."""
    return PlatformService.update_settings(payload)


@router.post("/settings/{kind}", response_model=PlatformSettingsResponse)
async def upload_platform_asset(
    kind: Annotated[AssetKind, Path(description="logo or favicon")],
    file: UploadFile = File(..., description="Image file"),
):
    """Upload a new logo or favicon. The previous file is left in storage."""
    content = await file.read()
    return PlatformService.upload_asset(kind, file.filename or "", content)


@router.delete("/settings/{kind}", response_model=PlatformSettingsResponse)
async def clear_platform_asset(
    kind: Annotated[AssetKind, Path(description="logo or favicon")],
):
    """Remove the logo or favicon."""
    return PlatformService.clear_asset(kind)


# =============================================================================
# Google Places
# =============================================================================

@router.post("/places/search", response_model=PlacesSearchResponse)
def search_places(payload: PlacesSearchRequest):
    """
    Search Google Places for candidates to review before import.

    Each place costs one Text Search share plus one Details call.
    """
    with PlacesClient() as places:
        candidates = ImportService.search(payload, places)

    return PlacesSearchResponse(
        businesses=candidates,
        total=len(candidates),
        message=f"Found {len(candidates)} businesses in {payload.city}",
    )


@router.post("/places/import", response_model=ImportResult | QueuedImportResponse)
def import_places(
    payload: PlacesImportRequest,
    admin: AuthUser = Depends(get_current_admin),
):
    """
    Import places as approved listings owned by the calling admin.

    Listings whose name and city already exist are counted as duplicates.
    With `background=true` the search and import run on the worker; poll
    /api/v1/tasks/{task_id} for progress.
    """
    if payload.background:
        from workers.celery_app import celery_app  # noqa: F401 - configures the broker
        from workers.tasks import import_places as import_places_task

        task = import_places_task.delay(payload.search.model_dump(mode="json"), str(admin.id))
        logger.info(f"Queued Places import {task.id} for {payload.search.city}")
        return QueuedImportResponse(
            task_id=task.id,
            message=f"Import queued. Use GET /api/v1/tasks/{task.id} to check status.",
        )

    if payload.candidates:
        category_id = payload.search.category_id if payload.search else None
        return ImportService.import_candidates(payload.candidates, admin.id, category_id=category_id)

    return ImportService.search_and_import(payload.search, admin.id)


@router.post("/places/rescrape", response_model=RescrapeResponse)
def rescrape_place(payload: RescrapeRequest):
    """
    Look one listing up on Google again.

    With `apply=true` the scraped fields, hours and new photos are written
    back onto the listing.
    """
    return ImportService.rescrape(payload)
