# =============================================================================
# lib/github_client.py - Repository Contributors
# =============================================================================
# Lists the contributors of the project repository via the GitHub REST API.
# Unauthenticated: subject to the public rate limit, so results are cached
# by the caller.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

GITHUB_CONTRIBUTORS_URL = "https://api.github.com/repos/{repository}/contributors"


class GitHubError(ApplicationError):
    """Raised when the contributors endpoint cannot be read."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code="GITHUB_ERROR",
            suggestion="Check GITHUB_REPOSITORY or wait for the rate limit to reset",
            details=details,
        )


def fetch_contributors(repository: str | None = None) -> list[dict[str, Any]]:
    """
    Fetch contributors of a repository.

    Args:
        repository: "owner/name" (defaults to settings.GITHUB_REPOSITORY)

    Returns:
        List of {"login", "avatar_url", "html_url", "contributions"}

    Raises:
        GitHubError: On HTTP failure or an unexpected payload
    """
    repository = repository or settings.GITHUB_REPOSITORY
    url = GITHUB_CONTRIBUTORS_URL.format(repository=repository)

    try:
        response = httpx.get(
            url,
            headers={"Accept": "application/vnd.github+json"},
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise GitHubError(f"Failed to fetch contributors: {e}", details={"repository": repository}) from e

    if not isinstance(payload, list):
        raise GitHubError("Unexpected contributors payload", details={"repository": repository})

    logger.debug(f"Fetched {len(payload)} contributors for {repository}")
    return [
        {
            "login": c.get("login", ""),
            "avatar_url": c.get("avatar_url", ""),
            "html_url": c.get("html_url", ""),
            "contributions": c.get("contributions", 0),
        }
        for c in payload
    ]
