# =============================================================================
# core/services/content_service.py - Course Catalog
# =============================================================================
# Resolves the subjects for a year/branch/semester from, in order:
# 1. The Google Sheets source (lib.sheets_client)
# 2. A static JSON catalog file (settings.CONTENT_CATALOG_PATH)
#
# Results are cached per partition for CONTENT_CACHE_TTL_SECONDS. Empty
# results are not cached so a newly filled sheet shows up immediately.
# =============================================================================

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from lib import sheets_client
from lib.cache import TTLCache
from app.config import settings
from app.exceptions import SubjectNotFoundError
from core.models.content import ImportantLink, ModuleContent, NotesLink, Subject, SubjectSummary

logger = logging.getLogger(__name__)

subjects_cache = TTLCache(ttl_seconds=settings.CONTENT_CACHE_TTL_SECONDS)


def _cache_key(year: str, branch: str, semester: str) -> str:
    return f"{year}-{branch}-{semester}".lower()


def load_static_catalog(path: str, year: str, branch: str, semester: str) -> dict[str, dict[str, Any]]:
    """
    Read one partition from a static JSON catalog.

    File layout: {year: {branch: {semester: {subject_key: Subject}}}}.
    Returns {} when the file or partition is missing or unreadable.
    """
    if not path:
        return {}

    try:
        catalog = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read content catalog {path}: {e}")
        return {}

    partition = (
        catalog.get(year.lower(), {})
        .get(branch.lower(), {})
        .get(semester.lower(), {})
    )
    # The key may be omitted inside the subject body
    return {key: {"key": key, **body} for key, body in partition.items()}


def _to_subjects(raw: dict[str, dict[str, Any]]) -> dict[str, Subject]:
    subjects: dict[str, Subject] = {}
    for key, body in raw.items():
        try:
            subjects[key] = Subject.model_validate(body)
        except ValidationError as e:
            logger.warning(f"Skipping malformed subject {key}: {e}")
    return subjects


class ContentService:
    """Read-only access to the course catalog."""

    @staticmethod
    def get_subjects(year: str, branch: str, semester: str) -> dict[str, Subject]:
        """
        All subjects of a partition, keyed by subject key.

        Never raises for source failures: an unavailable catalog is empty.
        """
        key = _cache_key(year, branch, semester)
        cached = subjects_cache.get(key)
        if cached is not None:
            return cached

        raw = sheets_client.fetch_subjects(year, branch, semester)
        source = "sheets"
        if not raw:
            raw = load_static_catalog(settings.CONTENT_CATALOG_PATH, year, branch, semester)
            source = "catalog"

        subjects = _to_subjects(raw)
        if subjects:
            subjects_cache.set(key, subjects)
            logger.info(f"Loaded {len(subjects)} subjects for {key} from {source}")
        return subjects

    @staticmethod
    def list_subjects(year: str, branch: str, semester: str) -> list[SubjectSummary]:
        return [
            SubjectSummary(
                key=s.key,
                name=s.name,
                icon=s.icon,
                color=s.color,
                module_numbers=sorted(s.modules),
            )
            for s in ContentService.get_subjects(year, branch, semester).values()
        ]

    @staticmethod
    def get_subject(year: str, branch: str, semester: str, subject_key: str) -> Subject:
        """
        Raises:
            SubjectNotFoundError: If the partition has no such subject
        """
        subject = ContentService.get_subjects(year, branch, semester).get(subject_key)
        if subject is None:
            raise SubjectNotFoundError(subject_key, year, branch, semester)
        return subject

    @staticmethod
    def list_modules(year: str, branch: str, semester: str, subject_key: str) -> list[ModuleContent]:
        """Modules of a subject in numeric order."""
        return ContentService.get_subject(year, branch, semester, subject_key).sorted_modules()

    @staticmethod
    def get_notes_links(
        year: str,
        branch: str,
        semester: str,
        subject_key: str,
        module_number: int,
    ) -> list[NotesLink]:
        """Module-level notes links; empty for an unknown module."""
        subject = ContentService.get_subject(year, branch, semester, subject_key)
        module = subject.modules.get(module_number)
        return module.notes_links if module else []

    @staticmethod
    def get_important_links(
        year: str,
        branch: str,
        semester: str,
        subject_key: str,
    ) -> list[ImportantLink]:
        rows = sheets_client.fetch_important_links(year, branch, semester, subject_key)
        return [ImportantLink(**row) for row in rows]

    @staticmethod
    def source_status() -> str:
        """Health of the primary content source: healthy, unhealthy or disabled."""
        if not settings.sheets_enabled:
            return "disabled"
        return "healthy" if sheets_client.check_connection() else "unhealthy"
