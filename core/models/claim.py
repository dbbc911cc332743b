# =============================================================================
# core/models/claim.py - Business Claim Schemas
# =============================================================================
# A claim is a user asserting ownership of an existing listing (typically an
# imported one). An admin approves or rejects it; approval reassigns the
# listing's owner_id to the claimant.
#
# Flow: pending -> approved | rejected
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ClaimStatus(str, Enum):
    """Possible states for a claim."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ClaimDecision(str, Enum):
    """Statuses an admin may set when reviewing."""
    APPROVED = "approved"
    REJECTED = "rejected"


class ClaimCreate(BaseModel):
    """
    Schema for submitting a claim.

    Example:
        {
            "business_id": "550e8400-...",
            "notes": "I'm the proprietor, GST no. 24AAACS...",
            "proof_document": "https://.../gst-certificate.pdf"
        }
    """

    business_id: UUID
    notes: str | None = Field(default=None, max_length=2000)
    proof_document: str | None = Field(default=None, max_length=1000)


class ClaimReview(BaseModel):
    """Admin decision on a pending claim."""

    status: ClaimDecision
    admin_notes: str | None = Field(default=None, max_length=2000)


class ClaimResponse(BaseModel):
    """
    A claim row.

    `business` is embedded on list endpoints; `claimant` (the claimant's
    profile) is merged in on the admin list.
    """
    model_config = ConfigDict(extra="ignore")

    id: UUID
    business_id: UUID
    claimant_id: UUID
    notes: str | None = None
    proof_document: str | None = None
    status: ClaimStatus
    admin_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    business: dict[str, Any] | None = None
    claimant: dict[str, Any] | None = None
