from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.resilient_attendance_repository import ResilientAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .database.store import RecordStore
from .members.memory_member_repository import InMemoryMemberRepository
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .members.resilient_member_repository import ResilientMemberRepository
from .notifications.dispatcher import NotificationDispatcher
from .notifications.memory_notification_repository import InMemoryNotificationRepository
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.resilient_notification_repository import ResilientNotificationRepository
from .users.memory_user_repository import InMemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.resilient_user_repository import ResilientUserRepository


@dataclass(frozen=True)
class Container:
    store: RecordStore
    conn: Optional[DatabaseConnection]

    members_repo: MemberRepository
    users_repo: UserRepository
    notifications_repo: NotificationRepository
    attendance_repo: AttendanceRepository

    dispatcher: NotificationDispatcher
    attendance_service: AttendanceService


def db_config_from_dict(db_config: dict) -> DBConfig:
    return DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config.get("password", "")),
        database=str(db_config["database"]),
        pool_size=int(db_config.get("pool_size", 5)),
        connect_timeout=int(db_config.get("connect_timeout", 3)),
        retry_cooldown=float(db_config.get("retry_cooldown", 5.0)),
    )


def build_container(
    *,
    db_config: Optional[dict] = None,
    durable: bool = True,
    store: Optional[RecordStore] = None,
    fail_open: bool = True,
) -> Container:
    """Wire repositories and services.

    With ``durable`` and a ``db_config`` every repository is MySQL-first
    with the record store as fallback; otherwise the record store alone.
    """

    store = store or RecordStore()

    members_repo: MemberRepository = InMemoryMemberRepository(store)
    users_repo: UserRepository = InMemoryUserRepository(store)
    notifications_repo: NotificationRepository = InMemoryNotificationRepository(store)
    attendance_repo: AttendanceRepository = InMemoryAttendanceRepository(store)

    conn: Optional[DatabaseConnection] = None
    if durable and db_config:
        conn = DatabaseConnection.get_instance(db_config_from_dict(db_config))
        members_repo = ResilientMemberRepository(MySQLMemberRepository(conn), members_repo)
        users_repo = ResilientUserRepository(MySQLUserRepository(conn), users_repo)
        notifications_repo = ResilientNotificationRepository(MySQLNotificationRepository(conn), notifications_repo)
        attendance_repo = ResilientAttendanceRepository(MySQLAttendanceRepository(conn), attendance_repo)

    dispatcher = NotificationDispatcher(notifications_repo, users_repo)
    attendance_service = AttendanceService(attendance_repo, members_repo, dispatcher, fail_open=fail_open)

    return Container(
        store=store,
        conn=conn,
        members_repo=members_repo,
        users_repo=users_repo,
        notifications_repo=notifications_repo,
        attendance_repo=attendance_repo,
        dispatcher=dispatcher,
        attendance_service=attendance_service,
    )
