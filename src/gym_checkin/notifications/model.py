from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import format_timestamp, parse_timestamp
from ..core.enums import NotificationPriority, NotificationStatus


@dataclass(frozen=True)
class Notification:
    notification_id: str
    user_id: str
    type: str
    title: str
    message: str
    priority: NotificationPriority
    status: NotificationStatus
    created_at: datetime
    data: Dict[str, Any] = field(default_factory=dict)
    branch_id: Optional[str] = None
    read_at: Optional[datetime] = None


def notification_to_dict(n: Notification) -> dict:
    return {
        "id": n.notification_id,
        "userId": n.user_id,
        "type": n.type,
        "title": n.title,
        "message": n.message,
        "priority": n.priority.value,
        "status": n.status.value,
        "read": n.status == NotificationStatus.READ,
        "readAt": format_timestamp(n.read_at),
        "data": dict(n.data),
        "branchId": n.branch_id,
        "createdAt": format_timestamp(n.created_at),
    }


def notification_from_dict(d: dict) -> Notification:
    return Notification(
        notification_id=str(d["id"]),
        user_id=str(d["userId"]),
        type=d["type"],
        title=d["title"],
        message=d["message"],
        priority=NotificationPriority(d["priority"]),
        status=NotificationStatus(d.get("status") or NotificationStatus.UNREAD.value),
        created_at=parse_timestamp(d["createdAt"]),
        data=dict(d.get("data") or {}),
        branch_id=d.get("branchId"),
        read_at=parse_timestamp(d.get("readAt")),
    )
