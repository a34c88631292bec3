"""
Constants - Shared configuration and constants

This module contains shared constants used across the Burbli application.
"""

from pathlib import Path

# Application directories
APP_DIR = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = APP_DIR / "config.yaml"
DEFAULT_DB_PATH = APP_DIR / "burbli.db"

# Australian states and territories, in display order
REGIONS = ["VIC", "NSW", "QLD", "SA", "WA", "TAS", "ACT", "NT"]

# Long names returned by the places API, mapped to region codes
STATE_ABBR = {
    "Victoria": "VIC",
    "New South Wales": "NSW",
    "Queensland": "QLD",
    "South Australia": "SA",
    "Western Australia": "WA",
    "Tasmania": "TAS",
    "Australian Capital Territory": "ACT",
    "Northern Territory": "NT",
}

# Sentinel used by filter criteria for "no restriction"
ALL = "ALL"

COST_NOT_SHARED = "Cost not shared"

# Public pages listed in the sitemap
SITE_ROUTES = [
    "/",
    "/feed",
    "/submit",
    "/signin",
    "/myposts",
    "/privacy",
    "/terms",
    "/contact",
]

NOTES_MAX_LENGTH = 2000
