from __future__ import annotations

import dataclasses
from typing import Any, Dict, Optional

from ..common.datetime_utils import now_local, parse_timestamp
from ..common.identifiers import generate_id
from ..common.pagination import PaginatedResult, Pagination, paginate
from ..common.validators import clean_changes
from ..core.constants import NOTIFICATION_ID_PREFIX
from ..core.enums import NotificationPriority, NotificationStatus
from ..database.store import RecordStore
from .model import Notification
from .repository import NotificationFilters, NotificationRepository

MUTABLE_FIELDS = ("status", "read_at", "title", "message", "priority", "data")
IMMUTABLE_FIELDS = ("notification_id", "created_at", "user_id")


class InMemoryNotificationRepository(NotificationRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def find_all(
        self,
        filters: Optional[NotificationFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[Notification]:
        filters = filters or NotificationFilters()
        with self._store.lock:
            items = [
                n
                for n in self._store.notifications
                if (not filters.user_id or n.user_id == filters.user_id)
                and (not filters.status or n.status == NotificationStatus(filters.status))
                and (not filters.branch_id or n.branch_id == filters.branch_id)
            ]
        items.sort(key=lambda n: (n.created_at, n.notification_id), reverse=True)
        return paginate(items, pagination)

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        with self._store.lock:
            return next((n for n in self._store.notifications if n.notification_id == notification_id), None)

    def create(
        self,
        *,
        user_id: str,
        type: str,
        title: str,
        message: str,
        priority: NotificationPriority,
        data: Optional[Dict[str, Any]] = None,
        branch_id: Optional[str] = None,
    ) -> Notification:
        notification = Notification(
            notification_id=generate_id(NOTIFICATION_ID_PREFIX),
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            priority=NotificationPriority(priority),
            status=NotificationStatus.UNREAD,
            created_at=now_local(),
            data=dict(data or {}),
            branch_id=branch_id,
        )
        with self._store.lock:
            self._store.notifications.append(notification)
        return notification

    def update(self, notification_id: str, /, **changes: Any) -> Optional[Notification]:
        changes = clean_changes(changes, mutable=MUTABLE_FIELDS, immutable=IMMUTABLE_FIELDS)
        if "status" in changes:
            changes["status"] = NotificationStatus(changes["status"])
        if "priority" in changes:
            changes["priority"] = NotificationPriority(changes["priority"])
        if "read_at" in changes:
            changes["read_at"] = parse_timestamp(changes["read_at"])
        with self._store.lock:
            items = self._store.notifications
            for idx, current in enumerate(items):
                if current.notification_id == notification_id:
                    items[idx] = dataclasses.replace(current, **changes)
                    return items[idx]
        return None

    def delete(self, notification_id: str) -> bool:
        with self._store.lock:
            items = self._store.notifications
            before = len(items)
            items[:] = [n for n in items if n.notification_id != notification_id]
            return len(items) < before
