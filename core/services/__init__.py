# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .academic_service import AcademicService
from .profile_service import ProfileService
from .auth_service import AuthService
from .content_service import ContentService
from .progress_service import ProgressService
from .storage_service import StorageService
from .marketplace_service import MarketplaceService
from .admin_service import AdminService
from .contributors_service import ContributorsService

__all__ = [
    "AcademicService",
    "ProfileService",
    "AuthService",
    "ContentService",
    "ProgressService",
    "StorageService",
    "MarketplaceService",
    "AdminService",
    "ContributorsService",
]
