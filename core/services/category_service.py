# =============================================================================
# core/services/category_service.py - Category Business Logic
# =============================================================================

import logging
from collections import Counter
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, slugify
from core.models.category import CategoryCreate, CategoryUpdate
from app.exceptions import CategoryNotFoundError

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Service for category operations.

    Everyone can browse categories; only admins create, edit or delete
    them. Slugs are always derived from the name.
    """

    @staticmethod
    def list_categories(with_counts: bool = False) -> list[dict[str, Any]]:
        """
        List all categories ordered by name.

        Args:
            with_counts: Also count approved listings per category

        Returns:
            List of category dicts
        """
        client = SupabaseClient.get_client()

        try:
            response = client.table("categories").select("*").order("name").execute()
            categories = response.data or []

            if with_counts:
                businesses = (
                    client.table("businesses")
                    .select("category_id")
                    .eq("status", "approved")
                    .execute()
                )
                counts = Counter(str(row.get("category_id")) for row in (businesses.data or []))
                for category in categories:
                    category["business_count"] = counts.get(str(category["id"]), 0)

            return categories

        except Exception as e:
            logger.error(f"Failed to list categories: {e}")
            raise

    @staticmethod
    def get_by_slug(slug: str) -> dict[str, Any]:
        """
        Get a category by slug.

        Raises:
            CategoryNotFoundError: If no category has this slug
        """
        category = SupabaseClient.fetch_one("categories", "slug", slug)
        if not category:
            raise CategoryNotFoundError(slug)
        return category

    @staticmethod
    def get_by_id(category_id: UUID | str) -> dict[str, Any]:
        """Get a category by ID."""
        category_id_str = normalize_uuid(category_id)
        category = SupabaseClient.fetch_one("categories", "id", category_id_str)
        if not category:
            raise CategoryNotFoundError(category_id_str)
        return category

    @staticmethod
    def create_category(payload: CategoryCreate) -> dict[str, Any]:
        """Create a category with a slug derived from its name."""
        client = SupabaseClient.get_client()

        data = payload.model_dump(exclude_none=True)
        data["slug"] = slugify(payload.name)

        try:
            response = client.table("categories").insert(data).execute()

            if response.data:
                category = response.data[0]
                logger.info(f"Created category: {category['id']} ({data['slug']})")
                return category

            raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Failed to create category: {e}")
            raise

    @staticmethod
    def update_category(category_id: UUID | str, payload: CategoryUpdate) -> dict[str, Any]:
        """Edit a category; renaming regenerates the slug."""
        category = CategoryService.get_by_id(category_id)

        data = payload.model_dump(exclude_unset=True)
        if data.get("name"):
            data["slug"] = slugify(data["name"])
        elif "name" in data:
            del data["name"]

        if not data:
            return category

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("categories")
                .update(data)
                .eq("id", category["id"])
                .execute()
            )
            logger.info(f"Updated category: {category['id']}")
            return response.data[0] if response.data else {**category, **data}

        except Exception as e:
            logger.error(f"Failed to update category {category['id']}: {e}")
            raise

    @staticmethod
    def delete_category(category_id: UUID | str) -> None:
        """Delete a category."""
        category = CategoryService.get_by_id(category_id)
        client = SupabaseClient.get_client()

        try:
            client.table("categories").delete().eq("id", category["id"]).execute()
            logger.info(f"Deleted category: {category['id']}")

        except Exception as e:
            logger.error(f"Failed to delete category {category['id']}: {e}")
            raise
