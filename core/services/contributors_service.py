# =============================================================================
# core/services/contributors_service.py - Project Contributors
# =============================================================================
# Contributor list for the credits page, cached to stay inside GitHub's
# unauthenticated rate limit.
# =============================================================================

import logging

from lib import github_client
from lib.cache import TTLCache
from lib.github_client import GitHubError
from app.config import settings
from app.exceptions import ContributorsUnavailableError
from core.models.contributor import Contributor

logger = logging.getLogger(__name__)

contributors_cache = TTLCache(ttl_seconds=settings.CONTENT_CACHE_TTL_SECONDS)


class ContributorsService:

    @staticmethod
    def get_contributors() -> list[Contributor]:
        """
        Raises:
            ContributorsUnavailableError: If GitHub cannot be reached
        """
        repository = settings.GITHUB_REPOSITORY
        cached = contributors_cache.get(repository)
        if cached is not None:
            return cached

        try:
            rows = github_client.fetch_contributors(repository)
        except GitHubError as e:
            logger.error(f"Contributors unavailable: {e}")
            raise ContributorsUnavailableError(e.message)

        contributors = [Contributor(**row) for row in rows]
        contributors_cache.set(repository, contributors)
        return contributors
