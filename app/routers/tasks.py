# =============================================================================
# app/routers/tasks.py - Background Import Status Endpoints
# =============================================================================
# Polling and cancellation for Places imports queued on the Celery worker.
# Admin only.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel

from app.auth import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_admin)])

_STATE_MESSAGES = {
    "PENDING": "Waiting in queue...",
    "STARTED": "Starting...",
    "REVOKED": "Cancelled",
}


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """State of a queued import."""
    task_id: str
    status: str
    current: int | None = None
    total: int | None = None
    progress: int | None = None
    message: str | None = None
    result: dict | None = None
    error: str | None = None


class TaskCancelResponse(BaseModel):
    task_id: str
    cancelled: bool
    message: str


def _async_result(task_id: str):
    from workers.celery_app import celery_app

    return celery_app.AsyncResult(task_id)


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")]
):
    """
    Get the status of an import.

    States:
    - PENDING: waiting in queue (also returned for unknown IDs)
    - STARTED: picked up by a worker
    - PROGRESS: running; current/total/progress describe the step
    - SUCCESS: finished; result holds the import counters
    - FAILURE: the worker crashed
    """
    try:
        result = _async_result(task_id)
        state = result.status

        response = TaskStatusResponse(task_id=task_id, status=state)

        if state == "PROGRESS":
            info = result.info or {}
            response.current = info.get("current")
            response.total = info.get("total")
            response.progress = info.get("percent", 0)
            response.message = info.get("message", "Importing...")

        elif state == "SUCCESS":
            payload = result.result or {}
            response.result = payload
            response.progress = 100
            if payload.get("success") is False:
                response.error = payload.get("error")
                response.message = "Import failed"
            else:
                response.message = "Complete"

        elif state == "FAILURE":
            response.error = str(result.result) if result.result else "Unknown error"
            response.message = "Failed"

        else:
            response.progress = 0
            response.message = _STATE_MESSAGES.get(state)

        return response

    except Exception as e:
        logger.error(f"Error getting task status for {task_id}: {e}")
        raise HTTPException(status_code=503, detail=f"Task backend unavailable: {e}")


@router.delete("/{task_id}", response_model=TaskCancelResponse)
async def cancel_task(
    task_id: Annotated[str, Path(description="Celery task ID")]
):
    """
    Cancel a queued or running import.

    Listings already inserted before the cancel stay in place.
    """
    try:
        result = _async_result(task_id)

        if result.status in ("SUCCESS", "FAILURE"):
            return TaskCancelResponse(
                task_id=task_id,
                cancelled=False,
                message=f"Task already {result.status.lower()}, cannot cancel",
            )

        result.revoke(terminate=True)
        logger.info(f"Cancelled task {task_id}")

        return TaskCancelResponse(task_id=task_id, cancelled=True, message="Task cancelled")

    except Exception as e:
        logger.error(f"Error cancelling task {task_id}: {e}")
        raise HTTPException(status_code=503, detail=f"Task backend unavailable: {e}")
