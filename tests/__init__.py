# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Business Directory API:
# - conftest.py: In-memory Supabase fake and shared fixtures
# - test_models.py / test_utils.py: Validation and helper unit tests
# - test_*_service.py, test_claims_transfers.py, test_platform_contact.py:
#   Service-layer tests against the fake
# - test_places.py / test_import.py / test_workers.py: Google Places pipeline
# - test_api.py: Endpoint tests through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
