# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the business directory API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError

from app.config import settings
from app.exceptions import (
    DirectoryException,
    database_exception_handler,
    directory_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    admin,
    businesses,
    categories,
    claims,
    contact,
    health,
    lookups,
    platform,
    sitemap,
    tasks,
    transfers,
)
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and shutdown."""
    logger.info(f"Starting directory API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.GOOGLE_PLACES_API_KEY:
        logger.warning("GOOGLE_PLACES_API_KEY not set; Places search and import are disabled")

    yield

    logger.info("Shutting down directory API")


# Create FastAPI application
app = FastAPI(
    title="Business Directory API",
    description="""
## Local Business Directory API

Browse and search local businesses across Indian cities, submit and manage
listings, and moderate them as an admin.

### How It Works

1. **Browse** - Search approved listings by category, city, state or text
2. **List a business** - Signed-in users submit listings; they start as *pending*
3. **Moderate** - Admins approve, reject or feature listings
4. **Claim / Transfer** - Take over an existing listing or hand one to another account
5. **Import** - Admins bulk-import listings from Google Places

Authentication uses Supabase Auth bearer tokens.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Current user profile and token verification"},
        {"name": "Businesses", "description": "Browse listings and manage your own"},
        {"name": "Categories", "description": "Business categories"},
        {"name": "Lookups", "description": "Tags, amenities and Indian states"},
        {"name": "Claims", "description": "Claim ownership of a listing"},
        {"name": "Transfers", "description": "Transfer a listing to another account"},
        {"name": "Contact", "description": "Contact form"},
        {"name": "Platform", "description": "Site branding and Maps key"},
        {"name": "Admin", "description": "Moderation and platform administration"},
        {"name": "Tasks", "description": "Track background import progress"},
        {"name": "Health", "description": "API health and readiness checks"},
        {"name": "SEO", "description": "sitemap.xml"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(DirectoryException)
async def handle_directory_exception(request: Request, exc: DirectoryException):
    """Handle custom directory exceptions."""
    return await directory_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle request body/query validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(APIError)
@app.exception_handler(SupabaseClientError)
async def handle_database_error(request: Request, exc: Exception):
    """Handle PostgREST and Supabase client errors."""
    return await database_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

API_PREFIX = "/api/v1"

app.include_router(auth_routes.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(businesses.router, prefix=f"{API_PREFIX}/businesses", tags=["Businesses"])
app.include_router(categories.router, prefix=f"{API_PREFIX}/categories", tags=["Categories"])
app.include_router(lookups.router, prefix=API_PREFIX, tags=["Lookups"])
app.include_router(claims.router, prefix=f"{API_PREFIX}/claims", tags=["Claims"])
app.include_router(transfers.router, prefix=f"{API_PREFIX}/transfers", tags=["Transfers"])
app.include_router(contact.router, prefix=f"{API_PREFIX}/contact", tags=["Contact"])
app.include_router(platform.router, prefix=f"{API_PREFIX}/platform", tags=["Platform"])
app.include_router(admin.router, prefix=f"{API_PREFIX}/admin", tags=["Admin"])
app.include_router(tasks.router, prefix=f"{API_PREFIX}/tasks", tags=["Tasks"])

# sitemap.xml lives at the site root
app.include_router(sitemap.router, tags=["SEO"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Business Directory API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
