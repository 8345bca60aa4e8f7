# =============================================================================
# lib/sheets_client.py - Google Sheets Content Source
# =============================================================================
# Reads the course catalog from a spreadsheet via the Sheets values API.
# The spreadsheet has three tabs, each with a header row:
#
#   MAIN_DATA!A:L        year, branch, semester, subject_key, subject_name,
#                        subject_icon, subject_color, module_number,
#                        notes_title, notes_url, topic_title, topic_description
#   VIDEOS_DATA!A:H      year, branch, semester, subject_key, module_number,
#                        topic_title, video_title, video_url
#   IMPORTANT_LINKS!A:F  year, branch, semester, subject_key, link_title, link_url
#
# Every public function degrades to an empty result when the source is not
# configured or unreachable; callers fall back to other sources.
#
# Usage:
#   from lib.sheets_client import fetch_subjects
#   subjects = fetch_subjects("fy", "comps", "odd")
# =============================================================================

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets/{sheet_id}/values/{range}"

MAIN_DATA_RANGE = "MAIN_DATA!A:L"
VIDEOS_DATA_RANGE = "VIDEOS_DATA!A:H"
IMPORTANT_LINKS_RANGE = "IMPORTANT_LINKS!A:F"

DEFAULT_ICON = "BookOpen"
DEFAULT_COLOR = "blue"


class SheetsError(Exception):
    """Raised internally when a range cannot be read."""


# =============================================================================
# HTTP
# =============================================================================

def fetch_range(range_name: str) -> list[list[str]]:
    """
    Fetch raw cell values for a range.

    Returns:
        List of rows (each a list of strings). Empty when the tab is empty.

    Raises:
        SheetsError: On HTTP or decoding failure
    """
    url = SHEETS_API_URL.format(sheet_id=settings.GOOGLE_SHEET_ID, range=range_name)

    try:
        response = httpx.get(
            url,
            params={"key": settings.GOOGLE_API_KEY},
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json().get("values") or []
    except (httpx.HTTPError, ValueError) as e:
        raise SheetsError(f"Failed to read {range_name}: {e}") from e


def check_connection() -> bool:
    """Check that the spreadsheet is reachable with the configured key."""
    if not settings.sheets_enabled:
        return False
    try:
        fetch_range("MAIN_DATA!A1:A1")
        return True
    except SheetsError as e:
        logger.warning(f"Google Sheets connection test failed: {e}")
        return False


# =============================================================================
# Parsing
# =============================================================================

def _cell(row: list[str], index: int) -> str:
    return row[index].strip() if index < len(row) and row[index] else ""


# Leading digits only: "2.5" and "3a" are modules 2 and 3
_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def _parse_module_number(value: str) -> int:
    """Module number from a sheet cell; blank, zero or non-numeric is 1."""
    match = _LEADING_DIGITS.match(value or "")
    return (int(match.group(1)) or 1) if match else 1


def _matches(row: list[str], *expected: str) -> bool:
    return all(
        _cell(row, i).lower() == value.lower()
        for i, value in enumerate(expected)
    )


def build_subjects(
    main_rows: list[list[str]],
    video_rows: list[list[str]],
    year: str,
    branch: str,
    semester: str,
) -> dict[str, dict[str, Any]]:
    """
    Build the nested subject structure from raw sheet rows.

    Both row lists include their header row, which is skipped.

    Returns:
        {subject_key: {"key", "name", "icon", "color",
                       "modules": {n: {"notes_links": [...], "topics": [...]}}}}
    """
    subjects: dict[str, dict[str, Any]] = {}

    for row in main_rows[1:]:
        if not _matches(row, year, branch, semester):
            continue

        subject_key = _cell(row, 3)
        if not subject_key:
            continue

        subject = subjects.setdefault(subject_key, {
            "key": subject_key,
            "name": _cell(row, 4) or subject_key,
            "icon": _cell(row, 5) or DEFAULT_ICON,
            "color": _cell(row, 6) or DEFAULT_COLOR,
            "modules": {},
        })

        module_number = _parse_module_number(_cell(row, 7))
        module = subject["modules"].setdefault(module_number, {
            "number": module_number,
            "notes_links": [],
            "topics": [],
        })

        notes_title, notes_url = _cell(row, 8), _cell(row, 9)
        if notes_title and notes_url:
            module["notes_links"].append({"title": notes_title, "url": notes_url})

        topic_title = _cell(row, 10)
        if topic_title and not any(t["title"] == topic_title for t in module["topics"]):
            module["topics"].append({
                "title": topic_title,
                "description": _cell(row, 11),
                "videos": [],
                "notes": [],
            })

    for row in video_rows[1:]:
        if not _matches(row, year, branch, semester):
            continue

        subject_key = _cell(row, 3)
        topic_title = _cell(row, 5)
        video_title = _cell(row, 6)
        video_url = _cell(row, 7)
        if not (subject_key and topic_title and video_title and video_url):
            continue

        subject = subjects.get(subject_key)
        module = subject["modules"].get(_parse_module_number(_cell(row, 4))) if subject else None
        if not module:
            continue

        for topic in module["topics"]:
            if topic["title"] == topic_title:
                topic["videos"].append({"title": video_title, "url": video_url})
                break

    return subjects


def build_important_links(
    rows: list[list[str]],
    year: str,
    branch: str,
    semester: str,
    subject_key: str,
) -> list[dict[str, str]]:
    """Filter IMPORTANT_LINKS rows for one subject (header row skipped)."""
    return [
        {"title": _cell(row, 4) or "Untitled", "url": _cell(row, 5) or "#"}
        for row in rows[1:]
        if _matches(row, year, branch, semester, subject_key)
    ]


# =============================================================================
# Public API
# =============================================================================

def fetch_subjects(year: str, branch: str, semester: str) -> dict[str, dict[str, Any]]:
    """
    Fetch all subjects for a year/branch/semester from the spreadsheet.

    Returns an empty dict when Sheets is disabled, unreachable or empty.
    """
    if not settings.sheets_enabled:
        logger.debug("Google Sheets credentials not configured")
        return {}

    try:
        main_rows = fetch_range(MAIN_DATA_RANGE)
        video_rows = fetch_range(VIDEOS_DATA_RANGE)
    except SheetsError as e:
        logger.error(f"Error fetching data from Google Sheets: {e}")
        return {}

    if len(main_rows) <= 1:
        logger.warning("No main data found in Google Sheets")
        return {}

    subjects = build_subjects(main_rows, video_rows, year, branch, semester)
    logger.info(f"Loaded {len(subjects)} subjects from Sheets for {year}/{branch}/{semester}")
    return subjects


def fetch_important_links(
    year: str,
    branch: str,
    semester: str,
    subject_key: str,
) -> list[dict[str, str]]:
    """Fetch the important links for one subject. Empty on any failure."""
    if not settings.sheets_enabled:
        return []

    try:
        rows = fetch_range(IMPORTANT_LINKS_RANGE)
    except SheetsError as e:
        logger.error(f"Error fetching important links from Google Sheets: {e}")
        return []

    return build_important_links(rows, year, branch, semester, subject_key)
