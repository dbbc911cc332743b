# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - businesses.py: Listing browse/detail and owner CRUD
# - categories.py: Category browse
# - lookups.py: Tags, amenities and states
# - claims.py: Ownership claims
# - transfers.py: Ownership transfers between accounts
# - contact.py: Contact form
# - platform.py: Public site settings and Maps key
# - sitemap.py: sitemap.xml (mounted at the root)
# - admin.py: Moderation and platform administration
# - tasks.py: Background import status
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import businesses
from . import categories
from . import lookups
from . import claims
from . import transfers
from . import contact
from . import platform
from . import sitemap
from . import admin
from . import tasks

__all__ = [
    "health",
    "businesses",
    "categories",
    "lookups",
    "claims",
    "transfers",
    "contact",
    "platform",
    "sitemap",
    "admin",
    "tasks",
]
