"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_TIMEZONE = "Asia/Kolkata"

DEFAULT_TOKEN_TTL_SECONDS = 30
DEFAULT_TOKEN_LEEWAY_SECONDS = 10
MAX_TOKEN_TTL_SECONDS = 300
TOKEN_TYPE = "qr"
TOKEN_ALGORITHM = "HS256"

DEFAULT_SCAN_SOURCE = "qr"
MAX_SOURCE_LENGTH = 32
MAX_NOTE_LENGTH = 500
MAX_MENU_ITEMS = 50

# (start, end, grace_minutes) per meal slot, in the configured civil timezone.
DEFAULT_MEAL_WINDOWS = {
    "breakfast": (time(6, 0), time(9, 0), 0),
    "lunch": (time(13, 0), time(15, 0), 0),
    "snacks": (time(16, 30), time(18, 0), 0),
    "dinner": (time(19, 30), time(21, 30), 0),
}
