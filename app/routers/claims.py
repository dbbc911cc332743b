# =============================================================================
# app/routers/claims.py - Business Claim Endpoints
# =============================================================================
# Users claim listings here; admins review them under /admin/claims.
# =============================================================================

from fastapi import APIRouter, Depends, status

from app.auth import AuthUser, get_active_user, get_current_user
from core.models.claim import ClaimCreate, ClaimResponse
from core.services.claim_service import ClaimService

router = APIRouter()


@router.post("", response_model=ClaimResponse, status_code=status.HTTP_201_CREATED)
async def create_claim(
    payload: ClaimCreate,
    user: AuthUser = Depends(get_active_user),
):
    """
    Claim ownership of a listing.

    One pending claim per listing per user; owners can't claim their own
    listing.
    """
    return ClaimService.create_claim(
        user.id,
        payload.business_id,
        notes=payload.notes,
        proof_document=payload.proof_document,
    )


@router.get("/mine", response_model=list[ClaimResponse])
async def list_my_claims(
    user: AuthUser = Depends(get_current_user),
):
    """The caller's claims, newest first."""
    return ClaimService.list_my_claims(user.id)
