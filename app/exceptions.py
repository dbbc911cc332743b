# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a machine-readable code and, where possible, a
# suggestion telling the caller how to fix the request.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError

from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


class DirectoryException(Exception):
    """
    Base exception for the directory API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "DIRECTORY_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Not Found Exceptions
# =============================================================================

class BusinessNotFoundError(DirectoryException):
    """Raised when a business ID or slug doesn't exist (or isn't visible)."""

    def __init__(self, business_key: str):
        super().__init__(
            message=f"Business not found: {business_key}",
            code="BUSINESS_NOT_FOUND",
            status_code=404,
            suggestion="Check the business ID or slug; unapproved listings are only visible to their owner",
            details={"business": business_key}
        )


class CategoryNotFoundError(DirectoryException):
    """Raised when a category ID or slug doesn't exist."""

    def __init__(self, category_key: str):
        super().__init__(
            message=f"Category not found: {category_key}",
            code="CATEGORY_NOT_FOUND",
            status_code=404,
            suggestion="List available categories with GET /categories",
            details={"category": category_key}
        )


class TagNotFoundError(DirectoryException):
    """Raised when a tag ID doesn't exist."""

    def __init__(self, tag_id: str):
        super().__init__(
            message=f"Tag not found: {tag_id}",
            code="TAG_NOT_FOUND",
            status_code=404,
            details={"tag_id": tag_id}
        )


class AmenityNotFoundError(DirectoryException):
    """Raised when an amenity ID doesn't exist."""

    def __init__(self, amenity_id: str):
        super().__init__(
            message=f"Amenity not found: {amenity_id}",
            code="AMENITY_NOT_FOUND",
            status_code=404,
            details={"amenity_id": amenity_id}
        )


class ImageNotFoundError(DirectoryException):
    """Raised when a business image doesn't exist on the given business."""

    def __init__(self, image_id: str):
        super().__init__(
            message=f"Image not found: {image_id}",
            code="IMAGE_NOT_FOUND",
            status_code=404,
            details={"image_id": image_id}
        )


class ClaimNotFoundError(DirectoryException):
    """Raised when a claim ID doesn't exist."""

    def __init__(self, claim_id: str):
        super().__init__(
            message=f"Claim not found: {claim_id}",
            code="CLAIM_NOT_FOUND",
            status_code=404,
            details={"claim_id": claim_id}
        )


class TransferNotFoundError(DirectoryException):
    """Raised when a transfer ID doesn't exist."""

    def __init__(self, transfer_id: str):
        super().__init__(
            message=f"Transfer not found: {transfer_id}",
            code="TRANSFER_NOT_FOUND",
            status_code=404,
            details={"transfer_id": transfer_id}
        )


class UserNotFoundError(DirectoryException):
    """Raised when a profile doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            status_code=404,
            details={"user_id": user_id}
        )


class ContactSubmissionNotFoundError(DirectoryException):
    """Raised when a contact submission ID doesn't exist."""

    def __init__(self, submission_id: str):
        super().__init__(
            message=f"Contact submission not found: {submission_id}",
            code="CONTACT_SUBMISSION_NOT_FOUND",
            status_code=404,
            details={"submission_id": submission_id}
        )


# =============================================================================
# Permission Exceptions
# =============================================================================

class NotBusinessOwnerError(DirectoryException):
    """Raised when a user tries to modify a listing they don't own."""

    def __init__(self, business_id: str):
        super().__init__(
            message=f"You don't own this business: {business_id}",
            code="NOT_BUSINESS_OWNER",
            status_code=403,
            suggestion="Submit a claim with POST /claims if this is your business",
            details={"business_id": business_id}
        )


class AdminRequiredError(DirectoryException):
    """Raised when a non-admin calls an admin endpoint."""

    def __init__(self):
        super().__init__(
            message="Admin access required",
            code="ADMIN_REQUIRED",
            status_code=403,
        )


class UserBlockedError(DirectoryException):
    """Raised when a blocked account tries to make changes."""

    def __init__(self, user_id: str):
        super().__init__(
            message="Your account has been blocked",
            code="USER_BLOCKED",
            status_code=403,
            suggestion="Contact the site administrator through the contact form",
            details={"user_id": user_id}
        )


class NotTransferRecipientError(DirectoryException):
    """Raised when someone other than the recipient responds to a transfer."""

    def __init__(self, transfer_id: str):
        super().__init__(
            message=f"This transfer isn't addressed to you: {transfer_id}",
            code="NOT_TRANSFER_RECIPIENT",
            status_code=403,
            details={"transfer_id": transfer_id}
        )


class NotTransferSenderError(DirectoryException):
    """Raised when someone other than the sender cancels a transfer."""

    def __init__(self, transfer_id: str):
        super().__init__(
            message=f"Only the sender can cancel this transfer: {transfer_id}",
            code="NOT_TRANSFER_SENDER",
            status_code=403,
            details={"transfer_id": transfer_id}
        )


class SelfBlockError(DirectoryException):
    """Raised when an admin tries to block their own account."""

    def __init__(self):
        super().__init__(
            message="You can't block your own account",
            code="SELF_BLOCK",
            status_code=400,
        )


# =============================================================================
# Workflow Exceptions
# =============================================================================

class InvalidStatusTransitionError(DirectoryException):
    """Raised when a claim/transfer is no longer pending."""

    def __init__(self, entity: str, entity_id: str, current: str, requested: str):
        super().__init__(
            message=f"Cannot change {entity} from '{current}' to '{requested}'",
            code="INVALID_STATUS_TRANSITION",
            status_code=409,
            suggestion=f"Only pending {entity}s can be updated",
            details={"id": entity_id, "current_status": current, "requested_status": requested}
        )


class DuplicateClaimError(DirectoryException):
    """Raised when a user already has a pending claim on the business."""

    def __init__(self, business_id: str):
        super().__init__(
            message="You already have a pending claim for this business",
            code="DUPLICATE_CLAIM",
            status_code=409,
            suggestion="Wait for an administrator to review your existing claim",
            details={"business_id": business_id}
        )


class OwnerClaimError(DirectoryException):
    """Raised when the current owner tries to claim their own listing."""

    def __init__(self, business_id: str):
        super().__init__(
            message="You already own this business",
            code="ALREADY_OWNER",
            status_code=400,
            details={"business_id": business_id}
        )


class SelfTransferError(DirectoryException):
    """Raised when an owner tries to transfer a listing to themselves."""

    def __init__(self, email: str):
        super().__init__(
            message="You can't transfer a business to yourself",
            code="SELF_TRANSFER",
            status_code=400,
            details={"to_user_email": email}
        )


class PendingTransferExistsError(DirectoryException):
    """Raised when a business already has a pending outgoing transfer."""

    def __init__(self, business_id: str):
        super().__init__(
            message="This business already has a pending transfer",
            code="TRANSFER_PENDING",
            status_code=409,
            suggestion="Cancel the pending transfer before starting a new one",
            details={"business_id": business_id}
        )


class BusinessNotApprovedError(DirectoryException):
    """Raised when featuring a listing that isn't approved."""

    def __init__(self, business_id: str, status: str):
        super().__init__(
            message=f"Only approved businesses can be featured (status: {status})",
            code="BUSINESS_NOT_APPROVED",
            status_code=400,
            details={"business_id": business_id, "status": status}
        )


# =============================================================================
# Platform / Integration Exceptions
# =============================================================================

class PlatformSettingsMissingError(DirectoryException):
    """Raised when updating settings but no settings row exists."""

    def __init__(self):
        super().__init__(
            message="No platform settings found",
            code="PLATFORM_SETTINGS_MISSING",
            status_code=500,
            suggestion="Seed the platform_settings table with a single row",
        )


class MapsKeyNotConfiguredError(DirectoryException):
    """Raised when the browser Maps key isn't configured."""

    def __init__(self):
        super().__init__(
            message="Google Maps key not configured",
            code="MAPS_KEY_NOT_CONFIGURED",
            status_code=503,
            suggestion="Set GOOGLE_MAPS_BROWSER_KEY in the environment",
        )


class PlacesNotConfiguredError(DirectoryException):
    """Raised when the Places web service key isn't configured."""

    def __init__(self):
        super().__init__(
            message="Google Places API key not configured",
            code="PLACES_NOT_CONFIGURED",
            status_code=503,
            suggestion="Set GOOGLE_PLACES_API_KEY in the environment",
        )


class PlacesApiError(DirectoryException):
    """Raised when the Places API returns an error status."""

    def __init__(self, api_status: str, error_message: str | None = None):
        super().__init__(
            message=f"Google API error: {api_status}",
            code="PLACES_API_ERROR",
            status_code=502,
            suggestion="Check the API key, billing and query parameters",
            details={"status": api_status, "error_message": error_message}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(DirectoryException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class FileTooLargeError(DirectoryException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class StorageUploadError(DirectoryException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def directory_exception_handler(
    request: Request,
    exc: DirectoryException
) -> JSONResponse:
    """
    Convert DirectoryException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    errors = jsonable_encoder(exc.errors()) if hasattr(exc, "errors") else str(exc)
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        }
    )


async def database_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Convert database errors to JSON responses.

    Raw PostgREST errors are mapped through their Postgres code first, so
    a duplicate slug answers 409 DUPLICATE_VALUE instead of a bare 500.
    """
    if isinstance(exc, APIError):
        exc = SupabaseClientError.from_api_error(exc)

    if exc.status_code >= 500:
        logger.error(f"Database error on {request.url.path}: {exc}")
    else:
        logger.warning(f"Database rejected request on {request.url.path}: {exc}")

    content = {
        "detail": exc.message,
        "code": exc.code,
    }
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)
