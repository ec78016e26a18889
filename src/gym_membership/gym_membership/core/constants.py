"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "UTC"
DEFAULT_WEEKLY_CHECKIN_LIMIT = 5
DEFAULT_CHECKIN_WINDOW_DAYS = 7
CHECKINS_PAGE_SIZE = 10
DEFAULT_TX_ISOLATION = "READ COMMITTED"
STORE_CONFLICT_RETRIES = 1
