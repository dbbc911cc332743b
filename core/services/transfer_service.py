# =============================================================================
# core/services/transfer_service.py - Business Transfer Logic
# =============================================================================
# Owners hand listings to other accounts by email. The recipient accepts or
# rejects; the sender may cancel while pending. Accepting sets the transfer
# to "accepted" and then reassigns businesses.owner_id (two statements).
#
# to_user_id is resolved from profiles.email when the transfer is created.
# When the recipient hadn't registered yet it stays null and the recipient
# is matched by email when they respond.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid
from core.models.transfer import TransferStatus
from core.services.business_service import BusinessService
from app.exceptions import (
    InvalidStatusTransitionError,
    NotTransferRecipientError,
    NotTransferSenderError,
    PendingTransferExistsError,
    SelfTransferError,
    TransferNotFoundError,
)

logger = logging.getLogger(__name__)

TRANSFERS_TABLE = "business_transfers"
TRANSFER_COLUMNS = "*, business:businesses(id, name, slug, city)"


class TransferService:
    """Service for ownership transfers."""

    @staticmethod
    def create_transfer(
        user_id: UUID | str,
        user_email: str | None,
        business_id: UUID | str,
        to_user_email: str,
        message: str | None = None,
    ) -> dict[str, Any]:
        """
        Start a transfer of a listing the caller owns.

        Raises:
            BusinessNotFoundError / NotBusinessOwnerError
            SelfTransferError: If the recipient is the caller
            PendingTransferExistsError: If the listing already has one pending
        """
        user_id_str = normalize_uuid(user_id)
        business = BusinessService.get_owned_business(business_id, user_id_str)
        business_id_str = business["id"]

        email = to_user_email.strip().lower()
        if user_email and email == user_email.strip().lower():
            raise SelfTransferError(email)

        recipient = SupabaseClient.fetch_profile_by_email(email)
        if recipient and str(recipient["id"]) == str(user_id_str):
            raise SelfTransferError(email)

        client = SupabaseClient.get_client()

        try:
            pending = (
                client.table(TRANSFERS_TABLE)
                .select("id")
                .eq("business_id", business_id_str)
                .eq("status", TransferStatus.PENDING.value)
                .limit(1)
                .execute()
            )
            if pending.data:
                raise PendingTransferExistsError(business_id_str)

            response = (
                client.table(TRANSFERS_TABLE)
                .insert({
                    "business_id": business_id_str,
                    "from_user_id": user_id_str,
                    "to_user_email": email,
                    "to_user_id": str(recipient["id"]) if recipient else None,
                    "message": message,
                    "status": TransferStatus.PENDING.value,
                })
                .execute()
            )

            if response.data:
                transfer = response.data[0]
                logger.info(
                    f"Created transfer: {transfer['id']} of business {business_id_str} to {email}"
                    f"{'' if recipient else ' (recipient not registered)'}"
                )
                return transfer

            raise Exception("Insert returned no data")

        except PendingTransferExistsError:
            raise
        except Exception as e:
            logger.error(f"Failed to create transfer: {e}")
            raise

    @staticmethod
    def list_my_transfers(user_id: UUID | str, user_email: str | None = None) -> list[dict[str, Any]]:
        """
        Transfers the caller sent or received, newest first.

        Received includes transfers addressed to the caller's email before
        they registered.
        """
        user_id_str = normalize_uuid(user_id)
        client = SupabaseClient.get_client()

        party_filter = f"from_user_id.eq.{user_id_str},to_user_id.eq.{user_id_str}"
        if user_email:
            party_filter += f",to_user_email.eq.{user_email.strip().lower()}"

        try:
            response = (
                client.table(TRANSFERS_TABLE)
                .select(TRANSFER_COLUMNS)
                .or_(party_filter)
                .order("created_at", desc=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to list transfers for {user_id_str}: {e}")
            raise

    @staticmethod
    def list_pending_transfers(user_id: UUID | str, user_email: str | None = None) -> list[dict[str, Any]]:
        """
        Pending transfers addressed to the caller.

        Includes transfers sent to the caller's email before they registered.
        """
        user_id_str = normalize_uuid(user_id)
        client = SupabaseClient.get_client()

        recipient_filter = f"to_user_id.eq.{user_id_str}"
        if user_email:
            recipient_filter += f",to_user_email.eq.{user_email.strip().lower()}"

        try:
            response = (
                client.table(TRANSFERS_TABLE)
                .select(TRANSFER_COLUMNS)
                .eq("status", TransferStatus.PENDING.value)
                .or_(recipient_filter)
                .order("created_at", desc=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to list pending transfers for {user_id_str}: {e}")
            raise

    @staticmethod
    def _get_pending(transfer_id: str, requested: TransferStatus) -> dict[str, Any]:
        transfer = SupabaseClient.fetch_one(TRANSFERS_TABLE, "id", transfer_id)
        if not transfer:
            raise TransferNotFoundError(transfer_id)
        if transfer.get("status") != TransferStatus.PENDING.value:
            raise InvalidStatusTransitionError("transfer", transfer_id, transfer.get("status"), requested.value)
        return transfer

    @staticmethod
    def _set_status(transfer_id: str, data: dict[str, Any]) -> dict[str, Any]:
        client = SupabaseClient.get_client()
        response = client.table(TRANSFERS_TABLE).update(data).eq("id", transfer_id).execute()
        return response.data[0] if response.data else {"id": transfer_id, **data}

    @staticmethod
    def respond_to_transfer(
        user_id: UUID | str,
        user_email: str | None,
        transfer_id: UUID | str,
        accept: bool,
    ) -> dict[str, Any]:
        """
        Accept or reject a pending transfer addressed to the caller.

        Raises:
            TransferNotFoundError
            InvalidStatusTransitionError: If it isn't pending
            NotTransferRecipientError: If the caller isn't the recipient
        """
        user_id_str = normalize_uuid(user_id)
        transfer_id_str = normalize_uuid(transfer_id)
        requested = TransferStatus.ACCEPTED if accept else TransferStatus.REJECTED

        transfer = TransferService._get_pending(transfer_id_str, requested)

        if transfer.get("to_user_id"):
            is_recipient = str(transfer["to_user_id"]) == str(user_id_str)
        else:
            to_email = (transfer.get("to_user_email") or "").lower()
            is_recipient = bool(user_email) and to_email == user_email.strip().lower()

        if not is_recipient:
            raise NotTransferRecipientError(transfer_id_str)

        data: dict[str, Any] = {"status": requested.value}
        if not transfer.get("to_user_id"):
            data["to_user_id"] = user_id_str

        try:
            updated = TransferService._set_status(transfer_id_str, data)
            logger.info(f"Transfer {transfer_id_str} -> {requested.value}")

            if accept:
                client = SupabaseClient.get_client()
                (
                    client.table("businesses")
                    .update({"owner_id": user_id_str})
                    .eq("id", str(transfer["business_id"]))
                    .execute()
                )
                logger.info(f"Ownership of business {transfer['business_id']} reassigned to {user_id_str}")

            return updated

        except Exception as e:
            logger.error(f"Failed to respond to transfer {transfer_id_str}: {e}")
            raise

    @staticmethod
    def cancel_transfer(user_id: UUID | str, transfer_id: UUID | str) -> dict[str, Any]:
        """
        Cancel a pending transfer the caller sent.

        Raises:
            TransferNotFoundError / InvalidStatusTransitionError
            NotTransferSenderError: If the caller isn't the sender
        """
        transfer_id_str = normalize_uuid(transfer_id)
        transfer = TransferService._get_pending(transfer_id_str, TransferStatus.CANCELLED)

        if str(transfer.get("from_user_id")) != str(user_id):
            raise NotTransferSenderError(transfer_id_str)

        try:
            updated = TransferService._set_status(transfer_id_str, {"status": TransferStatus.CANCELLED.value})
            logger.info(f"Transfer {transfer_id_str} cancelled by sender")
            return updated

        except Exception as e:
            logger.error(f"Failed to cancel transfer {transfer_id_str}: {e}")
            raise
