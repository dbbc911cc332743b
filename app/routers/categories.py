# =============================================================================
# app/routers/categories.py - Category Endpoints (public)
# =============================================================================
# Admin CRUD lives in admin.py.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from core.models.category import CategoryResponse
from core.services.category_service import CategoryService

router = APIRouter()


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    with_counts: Annotated[bool, Query(description="Include approved listing counts")] = False,
):
    """List all categories by name."""
    return CategoryService.list_categories(with_counts=with_counts)


@router.get("/{slug}", response_model=CategoryResponse)
async def get_category(
    slug: Annotated[str, Path(description="Category slug")],
):
    """Get one category by slug."""
    return CategoryService.get_by_slug(slug)
