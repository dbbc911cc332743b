# =============================================================================
# app/routers/platform.py - Public Platform Endpoints
# =============================================================================
# Site branding for every page and the browser Maps key for embedded maps.
# Settings edits live under /admin/settings.
# =============================================================================

import logging

from fastapi import APIRouter

from app.config import settings
from app.exceptions import MapsKeyNotConfiguredError
from core.models.platform import MapsKeyResponse, PlatformSettingsResponse
from core.services.platform_service import PlatformService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/settings", response_model=PlatformSettingsResponse)
async def get_platform_settings():
    """App name, logo, favicon, contact details and SEO defaults."""
    return PlatformService.get_settings()


@router.get("/maps-key", response_model=MapsKeyResponse)
async def get_maps_key():
    """
    Browser Google Maps key.

    This key is meant for browsers and should be HTTP-referrer restricted
    in the Google Cloud console.
    """
    if not settings.GOOGLE_MAPS_BROWSER_KEY:
        logger.error("GOOGLE_MAPS_BROWSER_KEY is not configured")
        raise MapsKeyNotConfiguredError()

    return MapsKeyResponse(api_key=settings.GOOGLE_MAPS_BROWSER_KEY)
