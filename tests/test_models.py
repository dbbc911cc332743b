# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the request/response models to ensure:
# - Valid data is accepted and normalized
# - Invalid data raises ValidationError
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from uuid import uuid4

import pytest
from pydantic import ValidationError

from core.models import (
    BusinessCreate,
    BusinessHourInput,
    BusinessUpdate,
    ClaimReview,
    ContactCreate,
    HoursUpdate,
    ImageCreate,
    PlacesImportRequest,
    PlacesSearchRequest,
    PlatformSettingsUpdate,
    StatusUpdate,
    TagsUpdate,
    TransferCreate,
)


@pytest.fixture
def listing():
    return {
        "name": "Patel Hardware",
        "category_id": str(uuid4()),
        "address": "45 Station Road, Maninagar",
        "city": "Ahmedabad",
        "state": "Gujarat",
        "phone": "98250 12345",
        "email": "info@patelhardware.in",
    }


# =============================================================================
# Listing Models
# =============================================================================

class TestBusinessCreate:
    """Tests for BusinessCreate model."""

    def test_valid_listing(self, listing):
        business = BusinessCreate(**listing)

        assert business.name == "Patel Hardware"
        assert business.phone == "9825012345"
        assert business.slug is None

    def test_phone_with_country_code(self, listing):
        business = BusinessCreate(**{**listing, "phone": "+91-98250-12345"})

        assert business.phone == "+919825012345"

    @pytest.mark.parametrize("phone", ["12345", "5825012345", "+1 202 555 0100"])
    def test_invalid_phone(self, listing, phone):
        with pytest.raises(ValidationError):
            BusinessCreate(**{**listing, "phone": phone})

    def test_blank_optionals_become_none(self, listing):
        business = BusinessCreate(**{**listing, "website": "  ", "pincode": ""})

        assert business.website is None
        assert business.pincode is None

    def test_invalid_pincode(self, listing):
        with pytest.raises(ValidationError):
            BusinessCreate(**{**listing, "pincode": "3800"})

    def test_url_needs_scheme(self, listing):
        with pytest.raises(ValidationError):
            BusinessCreate(**{**listing, "website": "patelhardware.in"})

    def test_slug_pattern(self, listing):
        assert BusinessCreate(**{**listing, "slug": "patel-hardware-2"}).slug == "patel-hardware-2"
        with pytest.raises(ValidationError):
            BusinessCreate(**{**listing, "slug": "Patel Hardware"})

    def test_year_in_future_rejected(self, listing):
        with pytest.raises(ValidationError):
            BusinessCreate(**{**listing, "year_established": 3000})

    def test_missing_required(self, listing):
        del listing["email"]
        with pytest.raises(ValidationError):
            BusinessCreate(**listing)


class TestBusinessUpdate:

    def test_partial_update(self):
        update = BusinessUpdate(description="New description")

        assert update.model_dump(exclude_unset=True) == {"description": "New description"}


class TestHours:

    def test_seconds_trimmed(self):
        hour = BusinessHourInput(day_of_week=2, open_time="09:00:00", close_time="")

        assert hour.open_time == "09:00"
        assert hour.close_time is None

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon"])
    def test_invalid_time(self, value):
        with pytest.raises(ValidationError):
            BusinessHourInput(day_of_week=1, open_time=value)

    def test_day_range(self):
        with pytest.raises(ValidationError):
            BusinessHourInput(day_of_week=7)

    def test_duplicate_days(self):
        with pytest.raises(ValidationError):
            HoursUpdate(hours=[{"day_of_week": 1}, {"day_of_week": 1}])


class TestTagsAndImages:

    def test_custom_tags_cleaned(self):
        tags = TagsUpdate(custom_tags=[" Pure Veg ", "", "Pure Veg", "AC"])

        assert tags.custom_tags == ["Pure Veg", "AC"]

    def test_image_url_validated(self):
        with pytest.raises(ValidationError):
            ImageCreate(image_url="ftp://example.com/a.png")


class TestStatusUpdate:

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            StatusUpdate(status="archived")


# =============================================================================
# Claims / Transfers / Contact / Settings
# =============================================================================

class TestWorkflowModels:

    def test_claim_review_only_final_states(self):
        assert ClaimReview(status="approved").status.value == "approved"
        with pytest.raises(ValidationError):
            ClaimReview(status="pending")

    def test_transfer_email_validated(self):
        with pytest.raises(ValidationError):
            TransferCreate(business_id=uuid4(), to_user_email="not-an-email")

    @pytest.mark.parametrize(
        "field, value",
        [("name", "A"), ("subject", "Hey"), ("message", "Too short"), ("message", "x" * 1001)],
    )
    def test_contact_lengths(self, field, value):
        data = {
            "name": "Priya Shah",
            "email": "priya@example.com",
            "subject": "Listing correction",
            "message": "The phone number on my listing is wrong.",
            field: value,
        }
        with pytest.raises(ValidationError):
            ContactCreate(**data)

    def test_seo_title_limit(self):
        with pytest.raises(ValidationError):
            PlatformSettingsUpdate(seo_title="x" * 71)


# =============================================================================
# Places
# =============================================================================

class TestPlacesModels:

    def test_search_defaults(self):
        request = PlacesSearchRequest(city="Surat", category_id=uuid4())

        assert request.max_results == 60

    def test_max_results_capped(self):
        with pytest.raises(ValidationError):
            PlacesSearchRequest(city="Surat", category_id=uuid4(), max_results=61)

    def test_import_needs_candidates_or_search(self):
        with pytest.raises(ValidationError):
            PlacesImportRequest()

    def test_background_import_needs_search(self):
        candidate = {"name": "Kiran Bakery", "city": "Surat", "state": "Gujarat"}
        with pytest.raises(ValidationError):
            PlacesImportRequest(candidates=[candidate], background=True)
