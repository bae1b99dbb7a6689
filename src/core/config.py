"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("CALENDAR_DB_PATH", PROJECT_ROOT / "data" / "db" / "calendar-api.db"))

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

DEFAULT_MAX_VISIBLE = int(os.environ.get("CALENDAR_MAX_VISIBLE", "5"))
UPCOMING_EVENTS_LIMIT = 5

# 0 = Monday ... 6 = Sunday (same numbering as calendar/datetime)
WEEK_STARTS_ON = int(os.environ.get("CALENDAR_WEEK_STARTS_ON", "6"))

EVENT_TYPES = ("launch", "sale", "event", "deadline")

EVENT_TYPE_COLORS = {
    "launch": "#8b5cf6",
    "sale": "#ef4444",
    "event": "#3b82f6",
    "deadline": "#f59e0b",
    "default": "#10b981",
}

# Keywords checked in order against the lowercased title
EVENT_TYPE_KEYWORDS = [
    ("launch", ("launch",)),
    ("sale", ("sale", "black friday", "promotion")),
    ("deadline", ("deadline", "due")),
]

UNTITLED_EVENT = "Untitled Event"

# =============================================================================
# API CONFIGURATION
# =============================================================================

CALENDAR_API_KEY = os.environ.get("CALENDAR_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_EVENTS_PER_REQUEST = int(os.environ.get("MAX_EVENTS_PER_REQUEST", "2000"))
MAX_WINDOW_DAYS = int(os.environ.get("MAX_WINDOW_DAYS", "366"))
API_VERSION = "1.0.0"
