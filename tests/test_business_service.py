# =============================================================================
# tests/test_business_service.py - Listing Service Tests
# =============================================================================
# Runs BusinessService against the in-memory Supabase from conftest.
#
# Run with: pytest tests/test_business_service.py -v
# =============================================================================

from uuid import uuid4

import pytest

from app.exceptions import (
    BusinessNotApprovedError,
    BusinessNotFoundError,
    ImageNotFoundError,
    NotBusinessOwnerError,
)
from core.models.business import (
    BusinessCreate,
    BusinessFilters,
    BusinessHourInput,
    BusinessStatus,
    BusinessUpdate,
)
from core.services.business_service import BusinessService


# =============================================================================
# Browse / Search
# =============================================================================

class TestListBusinesses:
    """Tests for filtered, paginated listing."""

    def test_public_listing_only_returns_approved(self, db, make_business):
        make_business(name="Approved One")
        make_business(name="Pending One", status="pending")
        make_business(name="Rejected One", status="rejected")

        rows, total = BusinessService.list_approved()

        assert total == 1
        assert [r["name"] for r in rows] == ["Approved One"]

    def test_newest_first(self, db, make_business):
        make_business(name="Older")
        make_business(name="Newer")

        rows, _ = BusinessService.list_approved()

        assert [r["name"] for r in rows] == ["Newer", "Older"]

    def test_city_filter_is_case_insensitive_substring(self, db, make_business):
        make_business(name="In Town", city="Ahmedabad")
        make_business(name="Elsewhere", city="Surat")

        rows, total = BusinessService.list_approved(BusinessFilters(city="ahmed"))

        assert total == 1
        assert rows[0]["name"] == "In Town"

    def test_search_matches_name_or_description(self, db, make_business):
        make_business(name="Gupta Dental Clinic")
        make_business(name="Bright Smiles", description="Family dental care")
        make_business(name="Kiran Bakery")

        rows, total = BusinessService.list_approved(BusinessFilters(search="DENTAL"))

        assert total == 2
        assert {r["name"] for r in rows} == {"Gupta Dental Clinic", "Bright Smiles"}

    def test_search_strips_filter_syntax(self, db, make_business):
        make_business(name="Tea (and) Coffee")

        rows, total = BusinessService.list_approved(BusinessFilters(search="tea,"))

        assert total == 1

    def test_category_slug_filter(self, db, make_business, category):
        other = db.add("categories", name="Hotels", slug="hotels")
        make_business(name="Food Place")
        make_business(name="Stay Place", category_id=other["id"])

        rows, total = BusinessService.list_approved(BusinessFilters(category_slug="hotels"))

        assert total == 1
        assert rows[0]["name"] == "Stay Place"

    def test_unknown_category_slug_matches_nothing(self, db, make_business):
        make_business()

        rows, total = BusinessService.list_approved(BusinessFilters(category_slug="nope"))

        assert rows == []
        assert total == 0

    def test_featured_filter(self, db, make_business):
        make_business(name="Star", is_featured=True)
        make_business(name="Plain")

        rows, _ = BusinessService.list_approved(BusinessFilters(featured=True))

        assert [r["name"] for r in rows] == ["Star"]

    def test_pagination_keeps_total(self, db, make_business):
        for i in range(5):
            make_business(name=f"Shop {i}")

        rows, total = BusinessService.list_approved(page=2, page_size=2)

        assert total == 5
        assert [r["name"] for r in rows] == ["Shop 2", "Shop 1"]

    def test_public_listing_ignores_owner_filter(self, db, make_business):
        make_business(name="Someone Else's", owner_id=str(uuid4()))

        _, total = BusinessService.list_approved(BusinessFilters(owner_id=uuid4(), status=BusinessStatus.PENDING))

        assert total == 1


# =============================================================================
# Detail / Visibility
# =============================================================================

class TestGetBusiness:
    """Tests for detail lookup and visibility rules."""

    def test_lookup_by_slug_and_id(self, db, make_business):
        business = make_business(name="Sharma Sweets")

        by_slug = BusinessService.get_business("sharma-sweets")
        by_id = BusinessService.get_business(business["id"])

        assert by_slug["id"] == business["id"]
        assert by_id["slug"] == "sharma-sweets"

    def test_includes_related_rows(self, db, make_business):
        business = make_business()
        db.add("business_hours", business_id=business["id"], day_of_week=3, is_closed=False)
        db.add("business_hours", business_id=business["id"], day_of_week=1, is_closed=False)
        db.add("business_tag_assignments", business_id=business["id"], custom_tag="Sweets")
        db.add("business_amenity_assignments", business_id=business["id"], amenity_id=str(uuid4()))

        result = BusinessService.get_business(business["id"])

        assert [h["day_of_week"] for h in result["hours"]] == [1, 3]
        assert result["tags"][0]["custom_tag"] == "Sweets"
        assert len(result["amenities"]) == 1

    def test_missing_business_raises(self, db):
        with pytest.raises(BusinessNotFoundError):
            BusinessService.get_business("does-not-exist")

    def test_pending_hidden_from_public(self, db, make_business):
        business = make_business(status="pending")

        with pytest.raises(BusinessNotFoundError):
            BusinessService.get_business(business["id"], user_id=str(uuid4()))

    def test_pending_visible_to_owner_and_admin(self, db, make_business, owner_id):
        business = make_business(status="pending")

        assert BusinessService.get_business(business["id"], user_id=owner_id)["id"] == business["id"]
        assert BusinessService.get_business(business["id"], is_admin=True)["id"] == business["id"]


# =============================================================================
# Create / Update / Delete
# =============================================================================

class TestWrites:
    """Tests for owner CRUD."""

    def test_create_starts_pending(self, db, owner_id, business_payload):
        business = BusinessService.create_business(owner_id, BusinessCreate(**business_payload))

        assert business["status"] == "pending"
        assert business["owner_id"] == owner_id
        assert "slug" not in business

    def test_owner_edit_resets_to_pending(self, db, make_business, owner_id):
        business = make_business(status="rejected", rejection_reason="Blurry photos")

        updated = BusinessService.update_business(
            business["id"], owner_id, BusinessUpdate(description="Fresh sweets daily")
        )

        assert updated["status"] == "pending"
        assert updated["rejection_reason"] is None
        assert updated["description"] == "Fresh sweets daily"

    def test_admin_edit_keeps_status(self, db, make_business, admin_id):
        business = make_business()

        updated = BusinessService.update_business(
            business["id"], admin_id, BusinessUpdate(website="https://sharma.in"), is_admin=True
        )

        assert updated["status"] == "approved"

    def test_required_columns_cannot_be_nulled(self, db, make_business, owner_id):
        business = make_business()

        updated = BusinessService.update_business(business["id"], owner_id, BusinessUpdate(name=None))

        assert updated["name"] == "Sharma Sweets"

    def test_non_owner_cannot_edit(self, db, make_business):
        business = make_business()

        with pytest.raises(NotBusinessOwnerError):
            BusinessService.update_business(business["id"], str(uuid4()), BusinessUpdate(description="x"))

    def test_delete(self, db, make_business, owner_id):
        business = make_business()

        BusinessService.delete_business(business["id"], owner_id)

        assert db.rows("businesses") == []


# =============================================================================
# Related Rows
# =============================================================================

class TestRelatedRows:
    """Tests for hours, tags, amenities and images."""

    def test_hours_always_seven_rows(self, db, make_business, owner_id):
        business = make_business()
        hours = [
            BusinessHourInput(day_of_week=1, open_time="09:00", close_time="18:00"),
            BusinessHourInput(day_of_week=0, is_closed=True, open_time="10:00", close_time="12:00"),
        ]

        rows = BusinessService.replace_hours(business["id"], owner_id, hours)

        assert len(rows) == 7
        by_day = {r["day_of_week"]: r for r in rows}
        assert by_day[1]["open_time"] == "09:00"
        assert by_day[0]["is_closed"] is True
        assert by_day[0]["open_time"] is None
        assert by_day[5]["is_closed"] is True

    def test_hours_replace_previous_rows(self, db, make_business, owner_id):
        business = make_business()
        BusinessService.replace_hours(business["id"], owner_id, [])
        BusinessService.replace_hours(business["id"], owner_id, [])

        assert len(db.rows("business_hours")) == 7

    def test_tags_dedupe_and_custom(self, db, make_business, owner_id):
        business = make_business()
        tag_id = uuid4()

        rows = BusinessService.replace_tags(business["id"], owner_id, [tag_id, tag_id], ["Pure Veg"])

        assert len(rows) == 2
        assert rows[0]["tag_id"] == str(tag_id)
        assert rows[1]["custom_tag"] == "Pure Veg"

    def test_empty_amenities_clears(self, db, make_business, owner_id):
        business = make_business()
        db.add("business_amenity_assignments", business_id=business["id"], amenity_id=str(uuid4()))

        rows = BusinessService.replace_amenities(business["id"], owner_id, [])

        assert rows == []
        assert db.rows("business_amenity_assignments") == []

    def test_new_primary_image_demotes_old(self, db, make_business, owner_id):
        business = make_business()
        first = BusinessService.add_image(business["id"], owner_id, "https://img/1.jpg", is_primary=True)
        BusinessService.add_image(business["id"], owner_id, "https://img/2.jpg", is_primary=True)

        primaries = [r for r in db.rows("business_images") if r["is_primary"]]
        assert len(primaries) == 1
        assert primaries[0]["image_url"] == "https://img/2.jpg"
        assert first["id"] != primaries[0]["id"]

    def test_upload_image_stores_file_and_row(self, db, make_business, owner_id):
        business = make_business()

        image = BusinessService.upload_image(business["id"], owner_id, "front.png", b"\x89PNG")

        assert f"/object/public/business-images/{business['id']}/" in image["image_url"]
        assert len(db.storage.files) == 1

    def test_delete_image_removes_bucket_file(self, db, make_business, owner_id):
        business = make_business()
        image = BusinessService.upload_image(business["id"], owner_id, "front.jpg", b"jpeg")

        BusinessService.delete_image(business["id"], image["id"], owner_id)

        assert db.rows("business_images") == []
        assert db.storage.files == {}

    def test_delete_image_of_other_business(self, db, make_business, owner_id):
        mine = make_business(name="Mine")
        other = make_business(name="Other")
        image = db.add("business_images", business_id=other["id"], image_url="https://img/x.jpg")

        with pytest.raises(ImageNotFoundError):
            BusinessService.delete_image(mine["id"], image["id"], owner_id)


# =============================================================================
# Admin Moderation
# =============================================================================

class TestModeration:
    """Tests for status, featured and dashboard."""

    def test_rejection_reason_kept_only_for_rejected(self, db, make_business):
        business = make_business(status="pending")

        rejected = BusinessService.update_status(business["id"], BusinessStatus.REJECTED, "Duplicate")
        assert rejected["rejection_reason"] == "Duplicate"

        approved = BusinessService.update_status(business["id"], BusinessStatus.APPROVED, "ignored")
        assert approved["status"] == "approved"
        assert approved["rejection_reason"] is None

    def test_cannot_feature_pending(self, db, make_business):
        business = make_business(status="pending")

        with pytest.raises(BusinessNotApprovedError):
            BusinessService.toggle_featured(business["id"], True)

    def test_unfeature_any_status(self, db, make_business):
        business = make_business(status="pending", is_featured=True)

        assert BusinessService.toggle_featured(business["id"], False)["is_featured"] is False

    def test_missing_business_status(self, db):
        with pytest.raises(BusinessNotFoundError):
            BusinessService.update_status(uuid4(), BusinessStatus.APPROVED)

    def test_dashboard_counts(self, db, make_business, admin_id):
        make_business(name="A")
        make_business(name="B", status="pending")
        make_business(name="C", is_featured=True)
        db.add("business_claims", status="pending")
        db.add("contact_submissions", is_read=False)
        db.add("contact_submissions", is_read=True)

        stats = BusinessService.dashboard_stats()

        assert stats["total_businesses"] == 3
        assert stats["pending"] == 1
        assert stats["approved"] == 2
        assert stats["featured"] == 1
        assert stats["total_users"] == 1
        assert stats["pending_claims"] == 1
        assert stats["unread_contact_submissions"] == 1
        assert [b["name"] for b in stats["recent_businesses"]] == ["C", "B", "A"]
