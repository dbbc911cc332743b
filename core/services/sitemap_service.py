# =============================================================================
# core/services/sitemap_service.py - sitemap.xml Generation
# =============================================================================
# Emits a sitemaps.org urlset with the static pages, one URL per category
# (/businesses/{slug}) and one per approved listing (/business/{slug}).
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import escape_xml, to_w3c_date, today_utc
from app.config import settings

logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

# (path, priority, changefreq)
STATIC_PAGES = [
    ("", "1.0", "daily"),
    ("/businesses", "0.9", "daily"),
    ("/categories", "0.8", "weekly"),
    ("/about", "0.6", "monthly"),
    ("/contact", "0.6", "monthly"),
    ("/privacy", "0.3", "yearly"),
    ("/terms", "0.3", "yearly"),
    ("/disclaimer", "0.3", "yearly"),
]


def _url(loc: str, lastmod: str, changefreq: str, priority: str) -> str:
    return (
        "  <url>\n"
        f"    <loc>{loc}</loc>\n"
        f"    <lastmod>{lastmod}</lastmod>\n"
        f"    <changefreq>{changefreq}</changefreq>\n"
        f"    <priority>{priority}</priority>\n"
        "  </url>\n"
    )


class SitemapService:
    """Builds sitemap.xml from categories and approved listings."""

    @staticmethod
    def fetch_entries() -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """(categories, approved businesses) rows with slug and date columns."""
        client = SupabaseClient.get_client()

        categories = (
            client.table("categories")
            .select("slug, created_at")
            .order("name")
            .execute()
        ).data or []
        businesses = (
            client.table("businesses")
            .select("slug, updated_at")
            .eq("status", "approved")
            .order("updated_at", desc=True)
            .execute()
        ).data or []

        return categories, businesses

    @staticmethod
    def render(categories: list[dict[str, Any]], businesses: list[dict[str, Any]]) -> str:
        """Render the urlset. Rows without a slug are skipped."""
        site = settings.site_url
        today = today_utc().isoformat()

        parts = [
            '<?xml version="1.0" encoding="UTF-8"?>\n',
            f'<urlset xmlns="{SITEMAP_NAMESPACE}">\n',
        ]

        for path, priority, changefreq in STATIC_PAGES:
            parts.append(_url(f"{site}{path}", today, changefreq, priority))

        for category in categories:
            if category.get("slug"):
                parts.append(_url(
                    f"{site}/businesses/{escape_xml(category['slug'])}",
                    to_w3c_date(category.get("created_at")),
                    "weekly",
                    "0.7",
                ))

        for business in businesses:
            if business.get("slug"):
                parts.append(_url(
                    f"{site}/business/{escape_xml(business['slug'])}",
                    to_w3c_date(business.get("updated_at")),
                    "weekly",
                    "0.6",
                ))

        parts.append("</urlset>")
        return "".join(parts)

    @staticmethod
    def minimal() -> str:
        """Fallback sitemap containing only the home page."""
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<urlset xmlns="{SITEMAP_NAMESPACE}">\n'
            "  <url>\n"
            f"    <loc>{settings.site_url}</loc>\n"
            "    <priority>1.0</priority>\n"
            "  </url>\n"
            "</urlset>"
        )

    @staticmethod
    def build() -> tuple[str, bool]:
        """
        Build the sitemap.

        Returns:
            Tuple of (xml, ok); ok is False when the minimal fallback was used
        """
        try:
            categories, businesses = SitemapService.fetch_entries()
            xml = SitemapService.render(categories, businesses)
            logger.info(
                f"Sitemap generated: {len(STATIC_PAGES) + len(categories) + len(businesses)} URLs"
            )
            return xml, True

        except Exception as e:
            logger.error(f"Error generating sitemap: {e}")
            return SitemapService.minimal(), False
