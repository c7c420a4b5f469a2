from __future__ import annotations

import logging
from datetime import datetime, timedelta

import pytest
from mysql.connector import errors as mysql_errors

from gym_checkin.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from gym_checkin.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from gym_checkin.attendance.repository import AttendanceFilters
from gym_checkin.attendance.resilient_attendance_repository import ResilientAttendanceRepository
from gym_checkin.attendance.service import AttendanceService
from gym_checkin.database.fallback import with_fallback
from gym_checkin.members.memory_member_repository import InMemoryMemberRepository
from gym_checkin.members.mysql_member_repository import MySQLMemberRepository
from gym_checkin.members.resilient_member_repository import ResilientMemberRepository
from gym_checkin.notifications.dispatcher import NotificationDispatcher
from gym_checkin.notifications.memory_notification_repository import InMemoryNotificationRepository
from gym_checkin.notifications.mysql_notification_repository import MySQLNotificationRepository
from gym_checkin.notifications.resilient_notification_repository import ResilientNotificationRepository
from gym_checkin.users.memory_user_repository import InMemoryUserRepository
from gym_checkin.users.mysql_user_repository import MySQLUserRepository
from gym_checkin.users.resilient_user_repository import ResilientUserRepository


class UnreachableDatabase:
    """Connection factory for a MySQL server that is down."""

    def __init__(self):
        self.attempts = 0

    def connect(self):
        self.attempts += 1
        raise mysql_errors.InterfaceError("2003: Can't connect to MySQL server on 'db:3306'")


@pytest.fixture
def dead_db():
    return UnreachableDatabase()


@pytest.fixture
def resilient_service(store, dead_db):
    members = ResilientMemberRepository(MySQLMemberRepository(dead_db), InMemoryMemberRepository(store))
    users = ResilientUserRepository(MySQLUserRepository(dead_db), InMemoryUserRepository(store))
    notifications = ResilientNotificationRepository(
        MySQLNotificationRepository(dead_db), InMemoryNotificationRepository(store)
    )
    attendance = ResilientAttendanceRepository(MySQLAttendanceRepository(dead_db), InMemoryAttendanceRepository(store))
    return AttendanceService(attendance, members, NotificationDispatcher(notifications, users))


def test_with_fallback_prefers_primary():
    calls = []

    def primary(x):
        calls.append("primary")
        return x * 2

    def secondary(x):
        calls.append("secondary")
        return -x

    assert with_fallback(primary, secondary)(21) == 42
    assert calls == ["primary"]


def test_with_fallback_replays_arguments_on_secondary(caplog):
    def primary(x, *, y):
        raise ConnectionError("boom")

    def secondary(x, *, y):
        return (x, y)

    with caplog.at_level(logging.WARNING, logger="gym_checkin.database.fallback"):
        assert with_fallback(primary, secondary, label="things.find")(1, y=2) == (1, 2)

    assert "things.find" in caplog.text
    assert "ConnectionError" in caplog.text


def test_with_fallback_propagates_secondary_errors():
    def primary():
        raise RuntimeError("durable down")

    def secondary():
        raise KeyError("volatile broken")

    with pytest.raises(KeyError):
        with_fallback(primary, secondary)()


def test_check_in_cycle_survives_a_dead_database(resilient_service, store, dead_db, fixed_now):
    opened = resilient_service.check_in("M1", "B1", "QR", now=fixed_now)
    closed = resilient_service.check_in("M1", "B1", "QR", now=fixed_now + timedelta(hours=1))
    reopened = resilient_service.check_in("M1", "B1", "QR", now=fixed_now + timedelta(hours=5))

    assert [opened.message, closed.message, reopened.message] == ["checked in", "checked out", "checked in"]
    assert closed.data.attendance_id == opened.data.attendance_id
    assert len([r for r in store.attendance if r.member_id == "M1"]) == 2
    assert store.members[0].last_visit == fixed_now + timedelta(hours=5)
    assert dead_db.attempts > 0


def test_denial_survives_a_dead_database(resilient_service, store, fixed_now):
    result = resilient_service.check_in("M2", "B1", "QR", now=fixed_now)

    assert not result.success
    assert result.error == "Member subscription has expired"
    assert sorted(n.user_id for n in store.notifications if n.type == "membership_expired") == ["U1", "U2"]


def test_reads_fall_back_too(resilient_service, fixed_now):
    resilient_service.check_in("M1", "B1", "QR", now=fixed_now)

    page = resilient_service.get_attendance(AttendanceFilters(branch_id="B1"))

    assert page.total == 1
    assert resilient_service.get_live_count("B1", today=fixed_now.date()) == 1


class _RecordingAttendance:
    def __init__(self):
        self.calls = []

    def find_all(self, filters=None, pagination=None):
        self.calls.append(("find_all", filters, pagination))
        return "durable-page"


def test_durable_success_is_not_mirrored(store):
    durable = _RecordingAttendance()
    volatile = InMemoryAttendanceRepository(store)
    repo = ResilientAttendanceRepository(durable, volatile)

    assert repo.find_all(AttendanceFilters(member_id="M1")) == "durable-page"
    assert durable.calls == [("find_all", AttendanceFilters(member_id="M1"), None)]
    assert repo.durable is durable
    assert repo.volatile is volatile
    assert store.attendance == []


def test_volatile_write_is_visible_only_in_volatile_store(store, dead_db):
    repo = ResilientAttendanceRepository(MySQLAttendanceRepository(dead_db), InMemoryAttendanceRepository(store))

    record = repo.create(
        member_id="M1",
        member_name="Member M1",
        branch_id="B1",
        check_in_time=datetime(2026, 2, 1, 9, 0),
        method="QR",
        status="success",
    )

    assert repo.get_by_id(record.attendance_id) == record
    assert [r.attendance_id for r in store.attendance] == [record.attendance_id]


def test_resilient_update_ignores_identity_fields(store, dead_db):
    repo = ResilientMemberRepository(MySQLMemberRepository(dead_db), InMemoryMemberRepository(store))

    updated = repo.update("M1", member_id="M999", created_at=None, plan="Gold")

    assert updated.member_id == "M1"
    assert updated.plan == "Gold"


class _ReadsDownWritesUp:
    """MySQL reachable for UPDATE only: reads and inserts fail, updates match nothing."""

    def find_all(self, filters=None, pagination=None):
        raise mysql_errors.OperationalError("Lost connection to MySQL server during query")

    def create(self, **fields):
        raise mysql_errors.OperationalError("Lost connection to MySQL server during query")

    def check_out(self, attendance_id, check_out_time):
        return None


def test_check_out_reaches_a_visit_kept_only_in_the_record_store(store, fixed_now):
    attendance = ResilientAttendanceRepository(_ReadsDownWritesUp(), InMemoryAttendanceRepository(store))
    members = InMemoryMemberRepository(store)
    service = AttendanceService(
        attendance, members, NotificationDispatcher(InMemoryNotificationRepository(store), InMemoryUserRepository(store))
    )

    first = service.check_in("M1", "B1", "QR", now=fixed_now)
    second = service.check_in("M1", "B1", "QR", now=fixed_now + timedelta(minutes=50))

    assert [first.message, second.message] == ["checked in", "checked out"]
    assert second.data.attendance_id == first.data.attendance_id
    assert second.data.check_out_time > second.data.check_in_time
    assert [r for r in store.attendance if r.is_open] == []
