"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
RESET_TOKEN_TTL_MINUTES = 60
RESET_TOKEN_BYTES = 32
MIN_PASSWORD_LENGTH = 6

EMPLOYEE_ID_PREFIX = "EMP"
EMPLOYEE_ID_WIDTH = 4

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
NOTIFICATION_FEED_LIMIT = 20

DEFAULT_REJECTION_REASON = "No reason provided"
