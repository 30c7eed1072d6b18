"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

HIGH_BAND_MIN = 90.0
MEDIUM_BAND_MIN = 75.0
DEFAULT_WARNING_THRESHOLD = 75.0

DEFAULT_HISTORY_PAGE_SIZE = 20
DEFAULT_REQUEST_TIMEOUT = 10

API_DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATE_FORMAT = "%d.%m.%Y"
