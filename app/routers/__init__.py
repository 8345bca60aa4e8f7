# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - academics.py: Year/branch/semester selection
# - content.py: Subjects, modules, notes and links
# - progress.py: Video completion tracking
# - marketplace.py: Listings, views, ratings, contact links
# - admin.py: Listing verification and admin role management
# - tasks.py: Background task status endpoints
# - contributors.py: Repository contributors
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import academics
from . import content
from . import progress
from . import marketplace
from . import admin
from . import tasks
from . import contributors

__all__ = [
    "health",
    "academics",
    "content",
    "progress",
    "marketplace",
    "admin",
    "tasks",
    "contributors",
]
