# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .business_service import BusinessService
from .category_service import CategoryService
from .claim_service import ClaimService
from .contact_service import ContactService
from .import_service import ImportService
from .lookup_service import LookupService
from .places_service import PlacesClient
from .platform_service import PlatformService
from .sitemap_service import SitemapService
from .storage_service import StorageService
from .transfer_service import TransferService
from .user_service import UserService

__all__ = [
    "BusinessService",
    "CategoryService",
    "ClaimService",
    "ContactService",
    "ImportService",
    "LookupService",
    "PlacesClient",
    "PlatformService",
    "SitemapService",
    "StorageService",
    "TransferService",
    "UserService",
]
