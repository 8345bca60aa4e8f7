# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the LearnConnect API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_utils.py: Email checks, TTL cache, contact links
# - test_sheets_client.py / test_content_service.py: Course catalog
# - test_progress_service.py: Video completion tracking
# - test_marketplace_service.py / test_admin_service.py: Marketplace and review
# - test_auth.py: Token verification and account flows
# - test_api.py: Route-level tests with TestClient
# - test_tasks.py: Celery task bodies
# - test_contributors.py: GitHub contributors and caching
#
# Run tests with: pytest
# =============================================================================
