from __future__ import annotations

from typing import Any, Dict, Optional

from ..common.pagination import PaginatedResult, Pagination
from ..core.enums import NotificationPriority
from ..database.fallback import FallbackRepository
from .model import Notification
from .repository import NotificationFilters, NotificationRepository


class ResilientNotificationRepository(FallbackRepository[NotificationRepository], NotificationRepository):
    def __init__(self, durable: NotificationRepository, volatile: NotificationRepository):
        super().__init__(durable, volatile, name="notifications")

    def find_all(
        self,
        filters: Optional[NotificationFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[Notification]:
        return self._run("find_all", filters, pagination)

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        return self._run("get_by_id", notification_id)

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
        return self._run(
            "create",
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            priority=priority,
            data=data,
            branch_id=branch_id,
        )

    def update(self, notification_id: str, /, **changes: Any) -> Optional[Notification]:
        return self._run("update", notification_id, **changes)

    def delete(self, notification_id: str) -> bool:
        return self._run("delete", notification_id)
