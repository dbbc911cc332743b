# =============================================================================
# tests/test_import.py - Places Import / Rescrape Tests
# =============================================================================
# ImportService against the in-memory Supabase; the Places client is a
# MagicMock so only the import logic is exercised here.
#
# Run with: pytest tests/test_import.py -v
# =============================================================================

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from app.exceptions import BusinessNotFoundError
from core.models.business import BusinessHourInput, PriceRange
from core.models.places import (
    PlaceCandidate,
    PlacePhoto,
    PlacesSearchRequest,
    RescrapeRequest,
)
from core.services.import_service import ImportService


def _candidate(name="Honest Restaurant", city="Ahmedabad", **overrides) -> PlaceCandidate:
    data = {
        "name": name,
        "address": "CG Road, Navrangpura, Ahmedabad, Gujarat 380009, India",
        "city": city,
        "state": "Gujarat",
        "pincode": "380009",
        "price_range": PriceRange.BUDGET,
        "photos": [
            PlacePhoto(photo_reference="a", url="https://maps/a", is_primary=True),
            PlacePhoto(photo_reference="b", url="https://maps/b"),
        ],
        "hours": [BusinessHourInput(day_of_week=1, open_time="09:00", close_time="22:00")],
    }
    data.update(overrides)
    return PlaceCandidate(**data)


# =============================================================================
# Import
# =============================================================================

class TestImportCandidates:
    """Tests for inserting reviewed candidates."""

    def test_imports_as_approved_with_placeholders(self, db, category, admin_id):
        result = ImportService.import_candidates([_candidate()], admin_id, category_id=category["id"])

        assert result.imported == 1
        business = db.rows("businesses")[0]
        assert business["status"] == "approved"
        assert business["owner_id"] == admin_id
        assert business["phone"] == "N/A"
        assert business["email"] == "contact@example.com"
        assert business["price_range"] == "budget"
        assert result.business_ids == [business["id"]]

    def test_writes_hours_and_photos(self, db, category, admin_id):
        ImportService.import_candidates([_candidate()], admin_id, category_id=category["id"])

        assert len(db.rows("business_hours")) == 7
        images = db.rows("business_images")
        assert [i["is_primary"] for i in images] == [True, False]

    def test_duplicates_are_counted_not_inserted(self, db, category, admin_id, make_business):
        make_business(name="Honest Restaurant", city="Ahmedabad")

        result = ImportService.import_candidates(
            [_candidate(), _candidate(name="New Place")], admin_id, category_id=category["id"]
        )

        assert result.imported == 1
        assert result.duplicates == 1
        assert result.total == 2

    def test_failures_do_not_abort_batch(self, db, category, admin_id):
        candidates = [_candidate(name="No Category"), _candidate(name="Has Category", category_id=category["id"])]

        result = ImportService.import_candidates(candidates, admin_id)

        assert result.failed == 1
        assert result.imported == 1

    def test_hours_failure_still_counts_as_imported(self, db, category, admin_id):
        db.failing.add("business_hours")

        result = ImportService.import_candidates([_candidate()], admin_id, category_id=category["id"])

        business = db.rows("businesses")[0]
        assert result.imported == 1
        assert result.failed == 0
        assert result.business_ids == [business["id"]]
        assert len(db.rows("business_images")) == 2

    def test_photo_failure_still_counts_as_imported(self, db, category, admin_id):
        db.failing.add("business_images")

        result = ImportService.import_candidates([_candidate()], admin_id, category_id=category["id"])

        assert result.imported == 1
        assert result.failed == 0
        assert len(db.rows("business_hours")) == 7

    def test_progress_callback(self, db, category, admin_id):
        progress = []

        ImportService.import_candidates(
            [_candidate(name="A"), _candidate(name="B")],
            admin_id,
            category_id=category["id"],
            on_progress=lambda *args: progress.append(args),
        )

        assert [p[:2] for p in progress] == [(1, 2), (2, 2)]


class TestSearchAndImport:

    def test_uses_category_name_as_term(self, db, category, admin_id):
        places = MagicMock()
        places.search.return_value = [_candidate(category_id=category["id"])]
        request = PlacesSearchRequest(city="Ahmedabad", category_id=category["id"], max_results=20)

        result = ImportService.search_and_import(request, admin_id, places=places)

        assert result.imported == 1
        args, kwargs = places.search.call_args
        assert args == ("Restaurants", "Ahmedabad")
        assert kwargs["max_results"] == 20
        places.close.assert_not_called()

    def test_explicit_term_wins(self, db, category):
        places = MagicMock()
        places.search.return_value = []
        request = PlacesSearchRequest(city="Surat", category_id=category["id"], category="Sweet shops")

        ImportService.search(request, places)

        assert places.search.call_args.args[0] == "Sweet shops"


# =============================================================================
# Rescrape
# =============================================================================

class TestRescrape:

    def test_not_found_on_google(self, db, make_business):
        business = make_business()
        places = MagicMock()
        places.find_place.return_value = None

        response = ImportService.rescrape(RescrapeRequest(business_id=business["id"]), places=places)

        assert response.success is False
        assert response.error == "Business not found on Google"
        places.find_place.assert_called_once_with("Sharma Sweets", "Ahmedabad")

    def test_preview_does_not_write(self, db, make_business):
        business = make_business()
        places = MagicMock()
        places.find_place.return_value = _candidate(name="Sharma Sweets", website="https://sharma.in")

        response = ImportService.rescrape(RescrapeRequest(business_id=business["id"]), places=places)

        assert response.success is True
        assert response.applied is False
        assert db.rows("businesses")[0].get("website") is None

    def test_apply_updates_fields_hours_and_new_photos(self, db, make_business):
        business = make_business()
        db.add("business_images", business_id=business["id"], image_url="https://maps/a", is_primary=True)
        places = MagicMock()
        places.find_place.return_value = _candidate(name="Sharma Sweets", website="https://sharma.in")

        response = ImportService.rescrape(
            RescrapeRequest(business_id=business["id"], apply=True), places=places
        )

        assert response.applied is True
        assert response.updated["website"] == "https://sharma.in"
        assert len(db.rows("business_hours")) == 7
        images = db.rows("business_images")
        assert [i["image_url"] for i in images] == ["https://maps/a", "https://maps/b"]
        assert [i["is_primary"] for i in images] == [True, False]

    def test_missing_business(self, db):
        with pytest.raises(BusinessNotFoundError):
            ImportService.rescrape(RescrapeRequest(business_id=uuid4()), places=MagicMock())

    def test_apply_needs_business_id(self):
        with pytest.raises(ValueError):
            RescrapeRequest(business_name="Sharma Sweets", city="Ahmedabad", apply=True)
