# =============================================================================
# core/services/contact_service.py - Contact Form Submissions
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid
from core.models.contact import ContactCreate
from app.exceptions import ContactSubmissionNotFoundError

logger = logging.getLogger(__name__)

SUBMISSIONS_TABLE = "contact_submissions"


class ContactService:
    """Service for the public contact form and its admin inbox."""

    @staticmethod
    def submit(payload: ContactCreate) -> dict[str, Any]:
        """Store a contact form submission (unread)."""
        client = SupabaseClient.get_client()

        data = payload.model_dump(mode="json")
        data = {key: value.strip() for key, value in data.items()}
        data["is_read"] = False

        try:
            response = client.table(SUBMISSIONS_TABLE).insert(data).execute()

            if response.data:
                submission = response.data[0]
                logger.info(f"Contact submission received: {submission['id']}")
                return submission

            raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Failed to store contact submission: {e}")
            raise

    @staticmethod
    def list_submissions(
        unread_only: bool = False,
        page: int = 1,
        page_size: int = 50,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List submissions, newest first.

        Returns:
            Tuple of (submissions list, total count)
        """
        client = SupabaseClient.get_client()

        query = client.table(SUBMISSIONS_TABLE).select("*", count="exact")
        if unread_only:
            query = query.eq("is_read", False)

        offset = (page - 1) * page_size
        query = query.order("created_at", desc=True).range(offset, offset + page_size - 1)

        try:
            response = query.execute()
            return response.data or [], response.count or 0

        except Exception as e:
            logger.error(f"Failed to list contact submissions: {e}")
            raise

    @staticmethod
    def _get(submission_id: str) -> dict[str, Any]:
        submission = SupabaseClient.fetch_one(SUBMISSIONS_TABLE, "id", submission_id)
        if not submission:
            raise ContactSubmissionNotFoundError(submission_id)
        return submission

    @staticmethod
    def mark_read(submission_id: UUID | str, is_read: bool = True) -> dict[str, Any]:
        """Mark a submission read (or unread)."""
        submission_id_str = normalize_uuid(submission_id)
        submission = ContactService._get(submission_id_str)
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(SUBMISSIONS_TABLE)
                .update({"is_read": is_read})
                .eq("id", submission_id_str)
                .execute()
            )
            return response.data[0] if response.data else {**submission, "is_read": is_read}

        except Exception as e:
            logger.error(f"Failed to update contact submission {submission_id_str}: {e}")
            raise

    @staticmethod
    def delete_submission(submission_id: UUID | str) -> None:
        submission_id_str = normalize_uuid(submission_id)
        ContactService._get(submission_id_str)
        client = SupabaseClient.get_client()

        try:
            client.table(SUBMISSIONS_TABLE).delete().eq("id", submission_id_str).execute()
            logger.info(f"Deleted contact submission: {submission_id_str}")

        except Exception as e:
            logger.error(f"Failed to delete contact submission {submission_id_str}: {e}")
            raise
