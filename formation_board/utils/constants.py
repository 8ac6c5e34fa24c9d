"""
Constants for the Formation Board application.

This module contains the fixed names and layout constants used throughout the
application.
"""

# Application metadata
APP_TITLE = "Formation Board"

# Well-known file names inside the data directory
CATALOG_FILENAME = "formations.json"
LEGACY_ROSTER_FILENAME = "items.json"  # single-roster file from the first release
ROSTER_FILENAME_PREFIX = "formation-"
ROSTER_FILENAME_SUFFIX = ".json"
CORRUPT_SUFFIX = ".corrupt"

# Roster layout
ROSTER_SIZE = 11  # standard 11v11
PLACEHOLDER_NAME = "あああ"  # marker label until the player is named
PRESET_MATCH_TOLERANCE = 8.0  # layout units, inclusive

# Catalog list display, e.g. 2025/12/03 14:30
DATE_DISPLAY_FORMAT = "%Y/%m/%d %H:%M"
