# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the directory web API:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - exceptions.py: Error types and their JSON rendering
# - auth/: Supabase JWT verification and role dependencies
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
