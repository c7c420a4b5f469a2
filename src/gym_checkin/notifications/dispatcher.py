from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..core.enums import NotificationPriority, Role
from ..users.repository import UserRepository
from .model import Notification
from .repository import NotificationRepository
from .templates import NotificationTemplate

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Creates Notification entities as side effects of other workflows.

    Best effort: nothing here raises to the caller. A failed write is logged
    and reported as ``None`` (or left out of the returned list).
    """

    def __init__(self, notifications: NotificationRepository, users: UserRepository):
        self._notifications = notifications
        self._users = users

    def notify(
        self,
        user_id: str,
        type: str,
        title: str,
        message: str,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        data: Optional[Dict[str, Any]] = None,
        branch_id: Optional[str] = None,
    ) -> Optional[Notification]:
        try:
            return self._notifications.create(
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                priority=priority,
                data=data,
                branch_id=branch_id,
            )
        except Exception:
            logger.exception("Failed to create %s notification for user %s", type, user_id)
            return None

    def notify_template(
        self,
        user_id: str,
        template: NotificationTemplate,
        *,
        data: Optional[Dict[str, Any]] = None,
        branch_id: Optional[str] = None,
    ) -> Optional[Notification]:
        return self.notify(
            user_id,
            template.type,
            template.title,
            template.message,
            template.priority,
            data=data,
            branch_id=branch_id,
        )

    def branch_admins(self, branch_id: str) -> List[str]:
        return [u.user_id for u in self._users.find_by_branch(branch_id) if u.role == Role.BRANCH_ADMIN]

    def notify_branch_admins(
        self,
        branch_id: str,
        template: NotificationTemplate,
        *,
        data: Optional[Dict[str, Any]] = None,
    ) -> List[Notification]:
        try:
            admin_ids = self.branch_admins(branch_id)
        except Exception:
            logger.exception("Failed to resolve branch admins for %s", branch_id)
            return []

        if not admin_ids:
            logger.info("No branch admins to notify for %s (%s)", branch_id, template.type)

        sent: List[Notification] = []
        for user_id in admin_ids:
            notification = self.notify_template(user_id, template, data=data, branch_id=branch_id)
            if notification is not None:
                sent.append(notification)
        return sent
