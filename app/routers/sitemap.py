# =============================================================================
# app/routers/sitemap.py - sitemap.xml
# =============================================================================
# Mounted at the site root (no /api/v1 prefix). Always answers 200; when the
# database can't be read a minimal sitemap with only the home page is served.
# =============================================================================

from fastapi import APIRouter
from fastapi.responses import Response

from core.services.sitemap_service import SitemapService

router = APIRouter()

XML_MEDIA_TYPE = "application/xml; charset=utf-8"


@router.get("/sitemap.xml", response_class=Response)
async def sitemap():
    """sitemap.xml for search engines."""
    xml, ok = SitemapService.build()

    headers = {"Cache-Control": "public, max-age=3600"} if ok else {}
    return Response(content=xml, media_type=XML_MEDIA_TYPE, headers=headers)
