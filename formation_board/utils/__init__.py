"""
Utilities package for the Formation Board application.

This package contains constants plus the time and file name helpers used
throughout the application.
"""
from .time_utils import utc_now, to_iso, parse_timestamp, fmt_created_at
from .file_utils import is_bare_filename
from .constants import (
    APP_TITLE, CATALOG_FILENAME, LEGACY_ROSTER_FILENAME, ROSTER_SIZE,
    PLACEHOLDER_NAME, PRESET_MATCH_TOLERANCE, DATE_DISPLAY_FORMAT
)

__all__ = [
    "utc_now", "to_iso", "parse_timestamp", "fmt_created_at", "is_bare_filename",
    "APP_TITLE", "CATALOG_FILENAME", "LEGACY_ROSTER_FILENAME", "ROSTER_SIZE",
    "PLACEHOLDER_NAME", "PRESET_MATCH_TOLERANCE", "DATE_DISPLAY_FORMAT"
]
