# =============================================================================
# core/models/lookup.py - Tag, Amenity and State Schemas
# =============================================================================
# Small reference tables used by the listing form:
# - business_tags: predefined tags ("Family Friendly", ...)
# - business_amenities: amenities with an icon name ("Wifi", "Car", ...)
# - indian_states: read-only list for the state dropdown
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TagCreate(BaseModel):
    """Schema for creating or renaming a tag."""

    name: str = Field(..., min_length=1, max_length=100)


class TagResponse(BaseModel):
    """A predefined tag."""
    model_config = ConfigDict(extra="ignore")

    id: UUID
    name: str
    slug: str | None = None
    created_at: datetime | None = None


class AmenityCreate(BaseModel):
    """
    Schema for creating an amenity.

    Example:
        {"name": "Free WiFi", "icon": "Wifi"}
    """

    name: str = Field(..., min_length=1, max_length=100)
    icon: str | None = Field(default=None, max_length=50)


class AmenityUpdate(BaseModel):
    """Schema for editing an amenity."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    icon: str | None = Field(default=None, max_length=50)


class AmenityResponse(BaseModel):
    """An amenity row."""
    model_config = ConfigDict(extra="ignore")

    id: UUID
    name: str
    slug: str | None = None
    icon: str | None = None
    created_at: datetime | None = None


class IndianState(BaseModel):
    """A state or union territory."""
    model_config = ConfigDict(extra="ignore")

    id: UUID
    name: str
    code: str
