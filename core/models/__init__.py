# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - academics.py: Year/branch/semester codes and selection
# - user.py: User profile schemas
# - content.py: Subject/module/topic/video/notes catalog
# - progress.py: Per-subject video completion
# - marketplace.py: Listings, categories, ratings, admin review
# - contributor.py: GitHub contributor entry
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Academic Selection
# -----------------------------------------------------------------------------
from .academics import (
    AcademicOptions,
    AcademicSelection,
    AcademicSelectionResponse,
    Branch,
    Option,
    Semester,
    Year,
)

# -----------------------------------------------------------------------------
# User Profiles
# -----------------------------------------------------------------------------
from .user import (
    NOT_SPECIFIED,
    ProfileCreate,
    ProfileUpdate,
    UserProfile,
)

# -----------------------------------------------------------------------------
# Course Content
# -----------------------------------------------------------------------------
from .content import (
    ImportantLink,
    ModuleContent,
    NotesLink,
    Subject,
    SubjectSummary,
    Topic,
    Video,
)

# -----------------------------------------------------------------------------
# Progress
# -----------------------------------------------------------------------------
from .progress import (
    ModuleProgress,
    ProgressCount,
    ProgressData,
    SubjectProgress,
    TopicProgress,
    VideoProgressUpdate,
)

# -----------------------------------------------------------------------------
# Contributors
# -----------------------------------------------------------------------------
from .contributor import Contributor

# -----------------------------------------------------------------------------
# Marketplace
# -----------------------------------------------------------------------------
from .marketplace import (
    AdminStats,
    BulkActionRequest,
    ContactLink,
    ItemCondition,
    ItemCreate,
    ItemUpdate,
    MarketplaceCategory,
    MarketplaceFilters,
    MarketplaceItem,
    RatingCreate,
    UserRating,
    VerificationAction,
    VerificationStatus,
)

__all__ = [
    # Academics
    "AcademicOptions",
    "AcademicSelection",
    "AcademicSelectionResponse",
    "Branch",
    "Option",
    "Semester",
    "Year",
    # User
    "NOT_SPECIFIED",
    "ProfileCreate",
    "ProfileUpdate",
    "UserProfile",
    # Content
    "ImportantLink",
    "ModuleContent",
    "NotesLink",
    "Subject",
    "SubjectSummary",
    "Topic",
    "Video",
    # Progress
    "ModuleProgress",
    "ProgressCount",
    "ProgressData",
    "SubjectProgress",
    "TopicProgress",
    "VideoProgressUpdate",
    # Contributors
    "Contributor",
    # Marketplace
    "AdminStats",
    "BulkActionRequest",
    "ContactLink",
    "ItemCondition",
    "ItemCreate",
    "ItemUpdate",
    "MarketplaceCategory",
    "MarketplaceFilters",
    "MarketplaceItem",
    "RatingCreate",
    "UserRating",
    "VerificationAction",
    "VerificationStatus",
]
