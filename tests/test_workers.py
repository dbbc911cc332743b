# =============================================================================
# tests/test_workers.py - Celery Task Tests
# =============================================================================
# Tasks are run in-process; the import service and current_task are patched
# so neither Redis nor Google is needed.
#
# Run with: pytest tests/test_workers.py -v
# =============================================================================

from unittest.mock import MagicMock, patch
from uuid import uuid4

from core.models.places import ImportResult
from workers.tasks import import_places, update_progress


def _search() -> dict:
    return {"city": "Surat", "category_id": str(uuid4()), "max_results": 20}


class TestUpdateProgress:

    def test_reports_percent(self):
        task = MagicMock()
        task.request.id = "task-1"

        with patch("workers.tasks.current_task", task):
            update_progress(5, 20, "Imported 5 of 20")

        task.update_state.assert_called_once_with(
            state="PROGRESS",
            meta={"current": 5, "total": 20, "percent": 25, "message": "Imported 5 of 20"},
        )

    def test_zero_total(self):
        task = MagicMock()
        task.request.id = "task-1"

        with patch("workers.tasks.current_task", task):
            update_progress(0, 0)

        assert task.update_state.call_args.kwargs["meta"]["percent"] == 0

    def test_outside_worker_is_noop(self):
        with patch("workers.tasks.current_task", None):
            update_progress(1, 2)


class TestImportPlacesTask:

    def test_success_returns_counters(self):
        result = ImportResult(imported=3, duplicates=1, business_ids=["a", "b", "c"])

        with patch("core.services.import_service.ImportService.search_and_import", return_value=result) as run, \
                patch("workers.tasks.update_progress"):
            outcome = import_places.run(_search(), "admin-1")

        assert outcome["success"] is True
        assert outcome["imported"] == 3
        assert outcome["duplicates"] == 1
        assert outcome["business_ids"] == ["a", "b", "c"]
        request, owner_id = run.call_args.args
        assert request.city == "Surat"
        assert owner_id == "admin-1"

    def test_failure_is_reported_not_raised(self):
        with patch(
            "core.services.import_service.ImportService.search_and_import",
            side_effect=RuntimeError("quota exceeded"),
        ), patch("workers.tasks.update_progress"):
            outcome = import_places.run(_search(), "admin-1")

        assert outcome == {"success": False, "error": "quota exceeded"}
