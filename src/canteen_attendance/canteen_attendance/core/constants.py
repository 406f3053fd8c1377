"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Kolkata"
DEFAULT_SYNC_INTERVAL_MINUTES = 5
DEFAULT_DEVICE_TIMEOUT_SECONDS = 30
DEFAULT_DEVICE_LIST_LOCATION = "1"
DISPLAY_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
