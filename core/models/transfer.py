# =============================================================================
# core/models/transfer.py - Business Transfer Schemas
# =============================================================================
# A transfer is an owner handing a listing to another account, addressed by
# email. The recipient accepts or rejects; the sender may cancel while it is
# still pending. Acceptance reassigns the listing's owner_id.
#
# Flow: pending -> accepted | rejected | cancelled
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class TransferStatus(str, Enum):
    """Possible states for a transfer."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class TransferCreate(BaseModel):
    """
    Schema for starting a transfer.

    Example:
        {
            "business_id": "550e8400-...",
            "to_user_email": "new.owner@example.com",
            "message": "Handing over the shop to my son"
        }
    """

    business_id: UUID
    to_user_email: EmailStr
    message: str | None = Field(default=None, max_length=1000)


class TransferRespond(BaseModel):
    """Recipient's answer."""

    accept: bool


class TransferResponse(BaseModel):
    """A transfer row with the listing embedded on list endpoints."""
    model_config = ConfigDict(extra="ignore")

    id: UUID
    business_id: UUID
    from_user_id: UUID
    to_user_email: str
    to_user_id: UUID | None = None
    message: str | None = None
    status: TransferStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    business: dict[str, Any] | None = None
