"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_LIMIT = 10
MAX_HISTORY_LIMIT = 200
DEFAULT_ACTIVITY_LIMIT = 10
DEFAULT_REPORT_DAYS = 7
MONTH_REPORT_DAYS = 30
DEFAULT_MESSAGE_LIMIT = 50
MAX_MESSAGE_LENGTH = 2000
