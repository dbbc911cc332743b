# =============================================================================
# core/models/platform.py - Platform Settings Schemas
# =============================================================================
# platform_settings holds a single row of site-wide branding and SEO values
# (app name, logo, favicon, contact details).
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


DEFAULT_APP_NAME = "NearIndia"


class AssetKind(str, Enum):
    """Uploadable branding assets and the settings column each one fills."""
    LOGO = "logo"
    FAVICON = "favicon"

    @property
    def column(self) -> str:
        return f"{self.value}_url"


class PlatformSettingsResponse(BaseModel):
    """The settings row (or defaults when none exists yet)."""
    model_config = ConfigDict(extra="ignore")

    id: UUID | None = None
    app_name: str = DEFAULT_APP_NAME
    logo_url: str | None = None
    favicon_url: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    address: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PlatformSettingsUpdate(BaseModel):
    """Partial update; only provided fields are written."""

    app_name: str | None = Field(default=None, min_length=1, max_length=100)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(default=None, max_length=30)
    address: str | None = Field(default=None, max_length=500)
    seo_title: str | None = Field(default=None, max_length=70)
    seo_description: str | None = Field(default=None, max_length=200)


class MapsKeyResponse(BaseModel):
    """Browser Maps key for rendering embedded maps."""

    api_key: str
