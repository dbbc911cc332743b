# =============================================================================
# tests/test_platform_contact.py - Reference Data, Settings, Contact, Users
# =============================================================================
# Service tests for the smaller admin-facing services.
#
# Run with: pytest tests/test_platform_contact.py -v
# =============================================================================

from uuid import uuid4

import pytest

from app.exceptions import (
    CategoryNotFoundError,
    ContactSubmissionNotFoundError,
    FileTooLargeError,
    InvalidFileTypeError,
    PlatformSettingsMissingError,
    SelfBlockError,
    TagNotFoundError,
    UserNotFoundError,
)
from core.models.category import CategoryCreate, CategoryUpdate
from core.models.contact import ContactCreate
from core.models.lookup import AmenityCreate, AmenityUpdate, TagCreate
from core.models.platform import DEFAULT_APP_NAME, AssetKind, PlatformSettingsUpdate
from core.services.category_service import CategoryService
from core.services.contact_service import ContactService
from core.services.lookup_service import LookupService
from core.services.platform_service import PlatformService
from core.services.storage_service import StorageService
from core.services.user_service import UserService


# =============================================================================
# Categories
# =============================================================================

class TestCategories:

    def test_create_derives_slug(self, db):
        category = CategoryService.create_category(CategoryCreate(name="Doctors & Clinics"))

        assert category["slug"] == "doctors-clinics"

    def test_rename_regenerates_slug(self, db, category):
        updated = CategoryService.update_category(category["id"], CategoryUpdate(name="Cafes"))

        assert updated["slug"] == "cafes"

    def test_edit_without_rename_keeps_slug(self, db, category):
        updated = CategoryService.update_category(category["id"], CategoryUpdate(icon="coffee"))

        assert updated["slug"] == "restaurants"
        assert updated["icon"] == "coffee"

    def test_counts_only_approved(self, db, category, make_business):
        make_business(name="A")
        make_business(name="B", status="pending")
        db.add("categories", name="Automobile", slug="automobile")

        categories = CategoryService.list_categories(with_counts=True)

        assert [c["name"] for c in categories] == ["Automobile", "Restaurants"]
        assert [c["business_count"] for c in categories] == [0, 1]

    def test_unknown_slug(self, db):
        with pytest.raises(CategoryNotFoundError):
            CategoryService.get_by_slug("missing")

    def test_delete(self, db, category):
        CategoryService.delete_category(category["id"])

        assert db.rows("categories") == []


# =============================================================================
# Tags / Amenities / States
# =============================================================================

class TestLookups:

    def test_tag_crud(self, db):
        tag = LookupService.create_tag(TagCreate(name=" Home Delivery "))
        assert tag["name"] == "Home Delivery"
        assert tag["slug"] == "home-delivery"

        renamed = LookupService.update_tag(tag["id"], TagCreate(name="Takeaway"))
        assert renamed["slug"] == "takeaway"

        LookupService.delete_tag(tag["id"])
        with pytest.raises(TagNotFoundError):
            LookupService.get_tag(tag["id"])

    def test_amenity_icon_only_update(self, db):
        amenity = LookupService.create_amenity(AmenityCreate(name="Free WiFi", icon="wifi"))

        updated = LookupService.update_amenity(amenity["id"], AmenityUpdate(icon="signal"))

        assert updated["icon"] == "signal"
        assert updated["slug"] == "free-wifi"

    def test_states_sorted(self, db):
        db.add("indian_states", name="Rajasthan", code="RJ")
        db.add("indian_states", name="Gujarat", code="GJ")

        assert [s["code"] for s in LookupService.list_states()] == ["GJ", "RJ"]


# =============================================================================
# Platform Settings
# =============================================================================

class TestPlatformSettings:

    def test_defaults_without_row(self, db):
        settings = PlatformService.get_settings()

        assert settings["app_name"] == DEFAULT_APP_NAME
        assert settings["logo_url"] is None

    def test_update_requires_row(self, db):
        with pytest.raises(PlatformSettingsMissingError):
            PlatformService.update_settings(PlatformSettingsUpdate(app_name="Local Finds"))

    def test_update_only_sent_fields(self, db):
        db.add("platform_settings", app_name="NearIndia", seo_title="Old title")

        updated = PlatformService.update_settings(PlatformSettingsUpdate(app_name="Local Finds"))

        assert updated["app_name"] == "Local Finds"
        assert updated["seo_title"] == "Old title"

    def test_upload_and_clear_logo(self, db):
        db.add("platform_settings", app_name="NearIndia", logo_url=None)

        updated = PlatformService.upload_asset(AssetKind.LOGO, "logo.svg", b"<svg/>")
        assert "/object/public/platform-assets/logo-" in updated["logo_url"]
        assert len(db.storage.files) == 1

        cleared = PlatformService.clear_asset(AssetKind.LOGO)
        assert cleared["logo_url"] is None
        assert db.storage.files == {}

    def test_asset_column(self):
        assert AssetKind.FAVICON.column == "favicon_url"


# =============================================================================
# Storage Validation
# =============================================================================

class TestStorageValidation:

    def test_extension_is_lowercased(self):
        assert StorageService.validate_image("Shop.JPG", 10) == ".jpg"

    def test_rejects_unknown_type(self):
        with pytest.raises(InvalidFileTypeError):
            StorageService.validate_image("menu.pdf", 10)

    def test_rejects_large_file(self):
        with pytest.raises(FileTooLargeError):
            StorageService.validate_image("big.png", 50 * 1024 * 1024)

    def test_path_from_public_url(self):
        url = "https://x.supabase.co/storage/v1/object/public/business-images/abc/1.png?t=1"

        assert StorageService.path_from_public_url("business-images", url) == "abc/1.png"
        assert StorageService.path_from_public_url("business-images", "https://maps.googleapis.com/p") is None


# =============================================================================
# Contact
# =============================================================================

class TestContact:

    def _payload(self, **overrides):
        data = {
            "name": "  Priya Shah ",
            "email": "priya@example.com",
            "subject": "Listing correction",
            "message": "The phone number on my listing is wrong.",
        }
        data.update(overrides)
        return ContactCreate(**data)

    def test_submit_strips_and_marks_unread(self, db):
        submission = ContactService.submit(self._payload())

        assert submission["name"] == "Priya Shah"
        assert submission["is_read"] is False

    def test_unread_filter_and_count(self, db):
        first = ContactService.submit(self._payload())
        ContactService.submit(self._payload(subject="Another question"))
        ContactService.mark_read(first["id"])

        rows, total = ContactService.list_submissions(unread_only=True)

        assert total == 1
        assert rows[0]["subject"] == "Another question"

    def test_delete_missing(self, db):
        with pytest.raises(ContactSubmissionNotFoundError):
            ContactService.delete_submission(uuid4())


# =============================================================================
# Users
# =============================================================================

class TestUsers:

    def test_profile_includes_roles(self, db, admin_id):
        profile = UserService.get_profile(admin_id)

        assert profile["roles"] == ["admin"]
        assert UserService.is_admin(admin_id) is True

    def test_missing_profile(self, db):
        with pytest.raises(UserNotFoundError):
            UserService.get_profile(uuid4())

    def test_list_users_merges_roles(self, db, admin_id):
        db.add("profiles", email="user@example.com", is_blocked=False)

        users = UserService.list_users()

        assert [u["roles"] for u in users] == [[], ["admin"]]

    def test_block_and_unblock(self, db, admin_id):
        user = db.add("profiles", email="spam@example.com", is_blocked=False)

        UserService.set_blocked(admin_id, user["id"], True)
        assert UserService.is_blocked(user["id"]) is True

        UserService.set_blocked(admin_id, user["id"], False)
        assert UserService.is_blocked(user["id"]) is False

    def test_admin_cannot_block_self(self, db, admin_id):
        with pytest.raises(SelfBlockError):
            UserService.set_blocked(admin_id, admin_id, True)
