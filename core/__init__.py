# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the directory's business logic:
# - models/: Pydantic schemas for data validation
# - services/: Database, storage and Google Places operations
#
# Code in this package should NOT import from FastAPI or Celery.
# This keeps the logic testable and reusable from the API and the worker.
# =============================================================================
