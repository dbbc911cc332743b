# =============================================================================
# app/routers/transfers.py - Business Transfer Endpoints
# =============================================================================
# Owners start transfers by recipient email; recipients accept or reject;
# senders may cancel while pending.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status

from app.auth import AuthUser, get_active_user, get_current_user
from core.models.transfer import TransferCreate, TransferRespond, TransferResponse
from core.services.transfer_service import TransferService

router = APIRouter()


@router.post("", response_model=TransferResponse, status_code=status.HTTP_201_CREATED)
async def create_transfer(
    payload: TransferCreate,
    user: AuthUser = Depends(get_active_user),
):
    """Offer a listing the caller owns to another account."""
    return TransferService.create_transfer(
        user.id,
        user.email,
        payload.business_id,
        payload.to_user_email,
        message=payload.message,
    )


@router.get("/mine", response_model=list[TransferResponse])
async def list_my_transfers(
    user: AuthUser = Depends(get_current_user),
):
    """Transfers the caller sent or received."""
    return TransferService.list_my_transfers(user.id, user.email)


@router.get("/pending", response_model=list[TransferResponse])
async def list_pending_transfers(
    user: AuthUser = Depends(get_current_user),
):
    """Pending transfers waiting for the caller's answer."""
    return TransferService.list_pending_transfers(user.id, user.email)


@router.post("/{transfer_id}/respond", response_model=TransferResponse)
async def respond_to_transfer(
    transfer_id: Annotated[UUID, Path(description="Transfer UUID")],
    payload: TransferRespond,
    user: AuthUser = Depends(get_active_user),
):
    """
    Accept or reject a transfer.

    Accepting makes the caller the listing's owner.
    """
    return TransferService.respond_to_transfer(user.id, user.email, transfer_id, payload.accept)


@router.post("/{transfer_id}/cancel", response_model=TransferResponse)
async def cancel_transfer(
    transfer_id: Annotated[UUID, Path(description="Transfer UUID")],
    user: AuthUser = Depends(get_active_user),
):
    """Cancel a pending transfer the caller sent."""
    return TransferService.cancel_transfer(user.id, transfer_id)
