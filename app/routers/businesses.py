# =============================================================================
# app/routers/businesses.py - Listing Endpoints
# =============================================================================
# Public browse/search and detail, plus owner CRUD for listings and their
# hours, tags, amenities and images.
#
# Writes require an authenticated, non-blocked account. Admins may act on
# any listing; everyone else only on listings they own.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from pydantic import BaseModel

from app.auth import AuthUser, get_active_user, get_current_user, get_current_user_optional
from core.models.business import (
    AmenitiesUpdate,
    BusinessCreate,
    BusinessFilters,
    BusinessImage,
    BusinessList,
    BusinessResponse,
    BusinessUpdate,
    HoursUpdate,
    ImageCreate,
    TagsUpdate,
)
from core.services.business_service import BusinessService
from core.services.user_service import UserService

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class ReplaceResponse(BaseModel):
    """Rows written by a replace-all endpoint."""
    business_id: str
    count: int
    rows: list[dict]


# =============================================================================
# Public Endpoints
# =============================================================================

@router.get("", response_model=BusinessList)
async def list_businesses(
    category_id: Annotated[UUID | None, Query(description="Filter by category ID")] = None,
    category: Annotated[str | None, Query(description="Filter by category slug")] = None,
    city: Annotated[str | None, Query(description="City substring")] = None,
    state: Annotated[str | None, Query(description="Exact state name")] = None,
    search: Annotated[str | None, Query(description="Substring of name or description")] = None,
    featured: Annotated[bool | None, Query(description="Only featured listings")] = None,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
):
    """
    Browse approved listings, newest first.

    Text filters are case-insensitive substring matches.
    """
    filters = BusinessFilters(
        category_id=category_id,
        category_slug=category,
        city=city,
        state=state,
        search=search,
        featured=featured,
    )
    businesses, total = BusinessService.list_approved(filters, page=page, page_size=page_size)

    return BusinessList(businesses=businesses, total=total, page=page, page_size=page_size)


@router.get("/mine", response_model=list[BusinessResponse])
async def list_my_businesses(
    user: AuthUser = Depends(get_current_user),
):
    """List the caller's own listings in every status."""
    return BusinessService.list_my_businesses(user.id)


@router.get("/{business_key}", response_model=BusinessResponse)
async def get_business(
    business_key: Annotated[str, Path(description="Business UUID or slug")],
    user: AuthUser | None = Depends(get_current_user_optional),
):
    """
    Get one listing with tags, hours and amenities.

    Pending and rejected listings are visible only to their owner and admins.
    """
    is_admin = UserService.is_admin(user.id) if user else False
    return BusinessService.get_business(
        business_key,
        user_id=user.id if user else None,
        is_admin=is_admin,
    )


# =============================================================================
# Owner Endpoints
# =============================================================================

@router.post("", response_model=BusinessResponse, status_code=status.HTTP_201_CREATED)
async def create_business(
    payload: BusinessCreate,
    user: AuthUser = Depends(get_active_user),
):
    """
    Submit a new listing.

    The listing starts "pending" until an admin approves it.
    """
    return BusinessService.create_business(user.id, payload)


@router.patch("/{business_id}", response_model=BusinessResponse)
async def update_business(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    payload: BusinessUpdate,
    user: AuthUser = Depends(get_active_user),
):
    """
    Edit a listing.

    An edit by the owner sends the listing back to moderation.
    """
    return BusinessService.update_business(business_id, user.id, payload, is_admin=user.is_admin)


@router.delete("/{business_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_business(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    user: AuthUser = Depends(get_active_user),
):
    """Delete a listing."""
    BusinessService.delete_business(business_id, user.id, is_admin=user.is_admin)


@router.put("/{business_id}/hours", response_model=ReplaceResponse)
async def replace_hours(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    payload: HoursUpdate,
    user: AuthUser = Depends(get_active_user),
):
    """
    Replace the weekly schedule.

    Days missing from the payload are stored as closed.
    """
    rows = BusinessService.replace_hours(business_id, user.id, payload.hours, is_admin=user.is_admin)
    return ReplaceResponse(business_id=str(business_id), count=len(rows), rows=rows)


@router.put("/{business_id}/tags", response_model=ReplaceResponse)
async def replace_tags(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    payload: TagsUpdate,
    user: AuthUser = Depends(get_active_user),
):
    """Replace predefined and custom tags."""
    rows = BusinessService.replace_tags(
        business_id, user.id, payload.tag_ids, payload.custom_tags, is_admin=user.is_admin
    )
    return ReplaceResponse(business_id=str(business_id), count=len(rows), rows=rows)


@router.put("/{business_id}/amenities", response_model=ReplaceResponse)
async def replace_amenities(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    payload: AmenitiesUpdate,
    user: AuthUser = Depends(get_active_user),
):
    """Replace amenities."""
    rows = BusinessService.replace_amenities(business_id, user.id, payload.amenity_ids, is_admin=user.is_admin)
    return ReplaceResponse(business_id=str(business_id), count=len(rows), rows=rows)


@router.post("/{business_id}/images", response_model=BusinessImage, status_code=status.HTTP_201_CREATED)
async def add_image(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    payload: ImageCreate,
    user: AuthUser = Depends(get_active_user),
):
    """Attach an image by URL."""
    return BusinessService.add_image(
        business_id, user.id, payload.image_url, is_primary=payload.is_primary, is_admin=user.is_admin
    )


@router.post("/{business_id}/images/upload", response_model=BusinessImage, status_code=status.HTTP_201_CREATED)
async def upload_image(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    file: UploadFile = File(..., description="Image file"),
    is_primary: bool = Form(default=False),
    user: AuthUser = Depends(get_active_user),
):
    """
    Upload a photo to storage and attach it.

    Allowed types and size come from ALLOWED_IMAGE_EXTENSIONS and
    MAX_IMAGE_SIZE_MB.
    """
    content = await file.read()
    return BusinessService.upload_image(
        business_id,
        user.id,
        file.filename or "",
        content,
        is_primary=is_primary,
        is_admin=user.is_admin,
    )


@router.delete("/{business_id}/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(
    business_id: Annotated[UUID, Path(description="Business UUID")],
    image_id: Annotated[UUID, Path(description="Image UUID")],
    user: AuthUser = Depends(get_active_user),
):
    """Remove an image from a listing."""
    BusinessService.delete_image(business_id, image_id, user.id, is_admin=user.is_admin)
