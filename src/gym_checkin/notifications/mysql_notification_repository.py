from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..common.datetime_utils import now_local, parse_timestamp
from ..common.identifiers import generate_id
from ..common.pagination import PaginatedResult, Pagination
from ..common.validators import clean_changes
from ..core.constants import NOTIFICATION_ID_PREFIX
from ..core.enums import NotificationPriority, NotificationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, select_page
from .memory_notification_repository import IMMUTABLE_FIELDS, MUTABLE_FIELDS
from .model import Notification
from .repository import NotificationFilters, NotificationRepository

COLUMNS = "notification_id, user_id, type, title, message, priority, status, data, branch_id, created_at, read_at"
ORDER_BY = "created_at DESC, notification_id DESC"


def _load_payload(raw: Any) -> Dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        return dict(json.loads(raw) or {})
    return dict(raw)


def _to_notification(r: Dict[str, Any]) -> Notification:
    return Notification(
        notification_id=str(r["notification_id"]),
        user_id=str(r["user_id"]),
        type=r["type"],
        title=r["title"],
        message=r["message"],
        priority=NotificationPriority(r["priority"]),
        status=NotificationStatus(r["status"]),
        created_at=r["created_at"],
        data=_load_payload(r.get("data")),
        branch_id=r.get("branch_id"),
        read_at=r.get("read_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_all(
        self,
        filters: Optional[NotificationFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[Notification]:
        filters = filters or NotificationFilters()
        clauses: list[str] = []
        params: list[object] = []
        if filters.user_id:
            clauses.append("user_id=%s")
            params.append(filters.user_id)
        if filters.status:
            clauses.append("status=%s")
            params.append(NotificationStatus(filters.status).value)
        if filters.branch_id:
            clauses.append("branch_id=%s")
            params.append(filters.branch_id)

        with db_cursor(self._conn_factory) as (_, cur):
            return select_page(
                cur,
                table="notifications",
                columns=COLUMNS,
                clauses=clauses,
                params=params,
                order_by=ORDER_BY,
                pagination=pagination,
                row_mapper=_to_notification,
            )

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {COLUMNS} FROM notifications WHERE notification_id=%s", (notification_id,))
            r = fetchone(cur)
            return _to_notification(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO notifications({COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)",
                (
                    notification.notification_id,
                    notification.user_id,
                    notification.type,
                    notification.title,
                    notification.message,
                    notification.priority.value,
                    notification.status.value,
                    json.dumps(notification.data, default=str),
                    notification.branch_id,
                    notification.created_at,
                    None,
                ),
            )
        return notification

    def update(self, notification_id: str, /, **changes: Any) -> Optional[Notification]:
        changes = clean_changes(changes, mutable=MUTABLE_FIELDS, immutable=IMMUTABLE_FIELDS)
        if "status" in changes:
            changes["status"] = NotificationStatus(changes["status"]).value
        if "priority" in changes:
            changes["priority"] = NotificationPriority(changes["priority"]).value
        if "read_at" in changes:
            changes["read_at"] = parse_timestamp(changes["read_at"])
        if "data" in changes:
            changes["data"] = json.dumps(changes["data"] or {}, default=str)

        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                assignments = ", ".join(f"{column}=%s" for column in changes)
                cur.execute(
                    f"UPDATE notifications SET {assignments} WHERE notification_id=%s",
                    tuple(changes.values()) + (notification_id,),
                )
            cur.execute(f"SELECT {COLUMNS} FROM notifications WHERE notification_id=%s", (notification_id,))
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def delete(self, notification_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notifications WHERE notification_id=%s", (notification_id,))
            return cur.rowcount > 0
