from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from ..common.pagination import PaginatedResult, Pagination
from ..core.enums import NotificationPriority, NotificationStatus
from .model import Notification


@dataclass(frozen=True)
class NotificationFilters:
    user_id: Optional[str] = None
    status: Optional[NotificationStatus] = None
    branch_id: Optional[str] = None


class NotificationRepository(Protocol):
    def find_all(
        self,
        filters: Optional[NotificationFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[Notification]:
        raise NotImplementedError

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        raise NotImplementedError

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
        """Persist a new unread notification; id and ``created_at`` are generated."""

        raise NotImplementedError

    def update(self, notification_id: str, /, **changes: Any) -> Optional[Notification]:
        raise NotImplementedError

    def delete(self, notification_id: str) -> bool:
        raise NotImplementedError
