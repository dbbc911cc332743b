# =============================================================================
# app/routers/lookups.py - Reference Data Endpoints (public)
# =============================================================================
# Tags, amenities and Indian states for the listing form and filters.
# Mounted at /api/v1 so the paths are /tags, /amenities and /states.
# =============================================================================

from fastapi import APIRouter

from core.models.lookup import AmenityResponse, IndianState, TagResponse
from core.services.lookup_service import LookupService

router = APIRouter()


@router.get("/tags", response_model=list[TagResponse])
async def list_tags():
    """Predefined tags, by name."""
    return LookupService.list_tags()


@router.get("/amenities", response_model=list[AmenityResponse])
async def list_amenities():
    """Amenities with icon names, by name."""
    return LookupService.list_amenities()


@router.get("/states", response_model=list[IndianState])
async def list_states():
    """Indian states and union territories, by name."""
    return LookupService.list_states()
