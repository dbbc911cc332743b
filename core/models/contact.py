# =============================================================================
# core/models/contact.py - Contact Form Schemas
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactCreate(BaseModel):
    """
    Public contact form submission.

    Example:
        {
            "name": "Asha Patel",
            "email": "asha@example.com",
            "subject": "Listing correction",
            "message": "The phone number on my listing is outdated."
        }
    """

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr = Field(..., max_length=255)
    subject: str = Field(..., min_length=5, max_length=200)
    message: str = Field(..., min_length=10, max_length=1000)


class ContactSubmissionResponse(BaseModel):
    """A stored submission."""
    model_config = ConfigDict(extra="ignore")

    id: UUID
    name: str
    email: str
    subject: str
    message: str
    is_read: bool = False
    created_at: datetime | None = None
