# =============================================================================
# core/models/category.py - Category Schemas
# =============================================================================
# Categories group listings ("Restaurants", "Hospitals", ...). Admins manage
# them; everyone can browse them. Slugs are derived from the name.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """
    Schema for creating a category.

    Example:
        {"name": "Restaurants", "icon": "Utensils", "description": "Places to eat"}
    """

    name: str = Field(..., min_length=2, max_length=100)
    icon: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=500)


class CategoryUpdate(BaseModel):
    """Schema for editing a category. Renaming regenerates the slug."""

    name: str | None = Field(default=None, min_length=2, max_length=100)
    icon: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=500)


class CategoryResponse(BaseModel):
    """A category row."""
    model_config = ConfigDict(extra="ignore", from_attributes=True)

    id: UUID
    name: str
    slug: str | None = None
    icon: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    business_count: int | None = None
