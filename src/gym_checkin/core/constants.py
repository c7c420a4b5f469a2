"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_RECENT_LIMIT = 5

MEMBER_ID_PREFIX = "MEM"
ATTENDANCE_ID_PREFIX = "ATT"
NOTIFICATION_ID_PREFIX = "NOT"
USER_ID_PREFIX = "USR"

MSG_CHECKED_IN = "checked in"
MSG_CHECKED_OUT = "checked out"
ERR_MEMBER_NOT_FOUND = "Member not found"
ERR_WRONG_BRANCH = "Member does not belong to this branch"
ERR_SUBSCRIPTION_EXPIRED = "Member subscription has expired"
