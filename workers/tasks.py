# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks.
#
# Tasks:
# - import_places: Google Places search + import for one category/city
# =============================================================================

import logging
from typing import Any

from celery import shared_task, current_task

logger = logging.getLogger(__name__)


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(current: int, total: int, message: str = "Processing..."):
    """
    Update task progress for polling.

    Args:
        current: Current step number
        total: Total steps
        message: Status message
    """
    if current_task and current_task.request.id:
        current_task.update_state(
            state="PROGRESS",
            meta={
                "current": current,
                "total": total,
                "percent": int((current / total) * 100) if total else 0,
                "message": message,
            }
        )


# =============================================================================
# Places Import Task
# =============================================================================

@shared_task(bind=True, name="workers.tasks.import_places")
def import_places(
    self,
    search: dict[str, Any],
    owner_id: str,
) -> dict[str, Any]:
    """
    Search Google Places and import every result as an approved listing.

    Progress is reported twice over: first while paging through search
    results, then per imported candidate.

    Args:
        search: PlacesSearchRequest as a JSON dict
        owner_id: Admin who queued the import (becomes the listings' owner)

    Returns:
        Dict with:
        - success: bool
        - imported / duplicates / failed: counters
        - business_ids: IDs of the created listings
        - error: message (when success is False)
    """
    from core.models.places import PlacesSearchRequest
    from core.services.import_service import ImportService

    request = PlacesSearchRequest.model_validate(search)
    logger.info(f"Importing places: category={request.category_id} city={request.city} by {owner_id}")

    update_progress(0, request.max_results, "Searching Google Places...")

    try:
        result = ImportService.search_and_import(request, owner_id, on_progress=update_progress)

    except Exception as e:
        logger.error(f"Places import failed: {e}")
        return {
            "success": False,
            "error": str(e),
        }

    return {
        "success": True,
        **result.model_dump(),
    }
