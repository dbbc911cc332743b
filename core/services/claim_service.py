# =============================================================================
# core/services/claim_service.py - Business Claim Logic
# =============================================================================
# Users claim listings they own in real life (usually imported ones).
# Admins review claims; approving one reassigns businesses.owner_id to the
# claimant. The two writes are sequential statements, not a transaction.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid
from core.models.claim import ClaimDecision, ClaimStatus
from app.exceptions import (
    BusinessNotFoundError,
    ClaimNotFoundError,
    DuplicateClaimError,
    InvalidStatusTransitionError,
    OwnerClaimError,
)

logger = logging.getLogger(__name__)

CLAIMS_TABLE = "business_claims"
CLAIM_COLUMNS = "*, business:businesses(id, name, slug, city, owner_id)"


class ClaimService:
    """Service for ownership claims."""

    @staticmethod
    def create_claim(
        user_id: UUID | str,
        business_id: UUID | str,
        notes: str | None = None,
        proof_document: str | None = None,
    ) -> dict[str, Any]:
        """
        Submit a claim on a listing.

        Raises:
            BusinessNotFoundError: If the listing doesn't exist
            OwnerClaimError: If the caller already owns it
            DuplicateClaimError: If the caller has a pending claim on it
        """
        user_id_str = normalize_uuid(user_id)
        business_id_str = normalize_uuid(business_id)

        business = SupabaseClient.fetch_business(business_id_str)
        if not business:
            raise BusinessNotFoundError(business_id_str)

        if str(business.get("owner_id")) == str(user_id_str):
            raise OwnerClaimError(business_id_str)

        client = SupabaseClient.get_client()

        try:
            existing = (
                client.table(CLAIMS_TABLE)
                .select("id")
                .eq("business_id", business_id_str)
                .eq("claimant_id", user_id_str)
                .eq("status", ClaimStatus.PENDING.value)
                .limit(1)
                .execute()
            )
            if existing.data:
                raise DuplicateClaimError(business_id_str)

            response = (
                client.table(CLAIMS_TABLE)
                .insert({
                    "business_id": business_id_str,
                    "claimant_id": user_id_str,
                    "notes": notes,
                    "proof_document": proof_document,
                    "status": ClaimStatus.PENDING.value,
                })
                .execute()
            )

            if response.data:
                claim = response.data[0]
                logger.info(f"Created claim: {claim['id']} on business {business_id_str} by {user_id_str}")
                return claim

            raise Exception("Insert returned no data")

        except DuplicateClaimError:
            raise
        except Exception as e:
            logger.error(f"Failed to create claim: {e}")
            raise

    @staticmethod
    def list_my_claims(user_id: UUID | str) -> list[dict[str, Any]]:
        """The caller's claims, newest first, with the listing embedded."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(CLAIMS_TABLE)
                .select(CLAIM_COLUMNS)
                .eq("claimant_id", normalize_uuid(user_id))
                .order("created_at", desc=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to list claims for {user_id}: {e}")
            raise

    @staticmethod
    def list_all_claims(status: ClaimStatus | None = None) -> list[dict[str, Any]]:
        """
        All claims for the admin queue, newest first.

        Claimant profiles are fetched with one `in` query and merged onto
        each claim as `claimant`.
        """
        client = SupabaseClient.get_client()

        query = client.table(CLAIMS_TABLE).select(CLAIM_COLUMNS)
        if status:
            query = query.eq("status", status.value)

        try:
            claims = query.order("created_at", desc=True).execute().data or []

            claimant_ids = list(dict.fromkeys(str(claim["claimant_id"]) for claim in claims))
            profiles: dict[str, dict[str, Any]] = {}
            if claimant_ids:
                response = (
                    client.table("profiles")
                    .select("id, email, full_name, phone")
                    .in_("id", claimant_ids)
                    .execute()
                )
                profiles = {str(row["id"]): row for row in (response.data or [])}

        except Exception as e:
            logger.error(f"Failed to list claims: {e}")
            raise

        for claim in claims:
            claim["claimant"] = profiles.get(str(claim["claimant_id"]))
        return claims

    @staticmethod
    def review_claim(
        claim_id: UUID | str,
        status: ClaimDecision,
        admin_notes: str | None = None,
    ) -> dict[str, Any]:
        """
        Approve or reject a pending claim.

        Approval then transfers ownership of the listing to the claimant.

        Raises:
            ClaimNotFoundError: If the claim doesn't exist
            InvalidStatusTransitionError: If the claim isn't pending
        """
        claim_id_str = normalize_uuid(claim_id)
        claim = SupabaseClient.fetch_one(CLAIMS_TABLE, "id", claim_id_str)
        if not claim:
            raise ClaimNotFoundError(claim_id_str)

        if claim.get("status") != ClaimStatus.PENDING.value:
            raise InvalidStatusTransitionError("claim", claim_id_str, claim.get("status"), status.value)

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(CLAIMS_TABLE)
                .update({"status": status.value, "admin_notes": admin_notes})
                .eq("id", claim_id_str)
                .execute()
            )
            updated = response.data[0] if response.data else {**claim, "status": status.value}
            logger.info(f"Claim {claim_id_str} -> {status.value}")

            if status == ClaimDecision.APPROVED:
                (
                    client.table("businesses")
                    .update({"owner_id": str(claim["claimant_id"])})
                    .eq("id", str(claim["business_id"]))
                    .execute()
                )
                logger.info(
                    f"Ownership of business {claim['business_id']} reassigned to {claim['claimant_id']}"
                )

            return updated

        except Exception as e:
            logger.error(f"Failed to review claim {claim_id_str}: {e}")
            raise
