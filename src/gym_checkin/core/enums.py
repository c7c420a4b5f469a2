from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Directory roles; only branch admins receive denied-entry alerts."""

    SUPER_ADMIN = "super_admin"
    BRANCH_ADMIN = "branch_admin"
    MEMBER = "member"


class MemberStatus(str, Enum):
    """Cached membership flag. Expiry is re-checked at the door."""

    ACTIVE = "Active"
    EXPIRED = "Expired"
    CANCELLED = "Cancelled"
    FROZEN = "Frozen"


class AttendanceStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NotificationStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"
