from __future__ import annotations

import re
from datetime import date, datetime

import pytest

from gym_checkin.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from gym_checkin.attendance.repository import AttendanceFilters
from gym_checkin.common.pagination import Pagination
from gym_checkin.core.enums import AttendanceStatus
from gym_checkin.database.mysql_base import like_any_case
from gym_checkin.main import SCHEMA_PATH
from gym_checkin.members.mysql_member_repository import MySQLMemberRepository
from gym_checkin.members.repository import MemberFilters
from gym_checkin.users.mysql_user_repository import MySQLUserRepository


class FakeCursor:
    def __init__(self, results):
        self._results = list(results)
        self.executed = []
        self.rowcount = 0
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self._results.pop(0) if self._results else None

    def fetchall(self):
        return self._results.pop(0) if self._results else []

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, *results):
        self.cursor = FakeCursor(results)
        self.connection = FakeConnection(self.cursor)

    def connect(self):
        return self.connection


ROW = {
    "attendance_id": "ATT_1",
    "member_id": "M1",
    "member_name": "Alex",
    "branch_id": "B1",
    "work_date": date(2026, 2, 1),
    "check_in_time": datetime(2026, 2, 1, 7, 30),
    "check_out_time": None,
    "method": "QR",
    "status": "success",
    "device_id": None,
}


def test_attendance_page_query_counts_then_selects():
    factory = FakeFactory({"total": 11}, [ROW])
    repo = MySQLAttendanceRepository(factory)

    page = repo.find_all(
        AttendanceFilters(branch_id="B1", date=date(2026, 2, 1), status=AttendanceStatus.SUCCESS, open_only=True),
        Pagination(page=3, page_size=5),
    )

    (count_sql, count_params), (select_sql, select_params) = factory.cursor.executed
    assert count_sql == (
        "SELECT COUNT(*) AS total FROM attendance_records "
        "WHERE branch_id=%s AND work_date=%s AND status=%s AND check_out_time IS NULL"
    )
    assert count_params == ("B1", date(2026, 2, 1), "success")
    assert select_sql.endswith("ORDER BY check_in_time DESC, attendance_id DESC LIMIT %s OFFSET %s")
    assert select_params == ("B1", date(2026, 2, 1), "success", 5, 10)

    assert page.total == 11
    assert page.total_pages == 3
    assert page.data[0].attendance_id == "ATT_1"
    assert page.data[0].is_open
    assert factory.connection.committed and factory.connection.closed


def test_unpaged_query_has_no_limit():
    factory = FakeFactory([ROW, dict(ROW, attendance_id="ATT_0")])

    page = MySQLAttendanceRepository(factory).find_all()

    ((sql, params),) = factory.cursor.executed
    assert "LIMIT" not in sql and "WHERE" not in sql
    assert params == ()
    assert page.total == 2 and page.page_size == 2 and page.total_pages == 1


def test_check_out_never_touches_failed_records():
    factory = FakeFactory(dict(ROW, check_out_time=datetime(2026, 2, 1, 9, 0)))

    record = MySQLAttendanceRepository(factory).check_out("ATT_1", datetime(2026, 2, 1, 9, 0))

    update_sql, update_params = factory.cursor.executed[0]
    assert update_sql == "UPDATE attendance_records SET check_out_time=%s WHERE attendance_id=%s AND status=%s"
    assert update_params == (datetime(2026, 2, 1, 9, 0), "ATT_1", "success")
    assert record.check_out_time == datetime(2026, 2, 1, 9, 0)


def test_failed_query_rolls_back_and_closes():
    factory = FakeFactory()

    def broken(sql, params=None):
        raise RuntimeError("lost connection")

    factory.cursor.execute = broken

    with pytest.raises(RuntimeError):
        MySQLAttendanceRepository(factory).get_by_id("ATT_1")

    assert factory.connection.rolled_back
    assert factory.connection.closed
    assert factory.cursor.closed


def test_member_search_is_case_insensitive_substring():
    factory = FakeFactory([])

    MySQLMemberRepository(factory).find_all(MemberFilters(search="ALEX"))

    ((sql, params),) = factory.cursor.executed
    assert "LOWER(name) LIKE %s" in sql
    assert params == ("%alex%", "%alex%", "%alex%")


def test_like_pattern_escapes_wildcards():
    assert like_any_case("50%_Off") == "%50\\%\\_off%"


def test_user_query_orders_by_name_then_id():
    factory = FakeFactory([])

    MySQLUserRepository(factory).find_all()

    ((sql, _),) = factory.cursor.executed
    assert sql.endswith("ORDER BY name ASC, user_id ASC")


def test_every_table_compares_strings_by_code_point():
    schema = SCHEMA_PATH.read_text(encoding="utf-8")
    tables = re.findall(r"CREATE TABLE IF NOT EXISTS (\w+) \((.*?)\n\)([^;]*);", schema, flags=re.S)

    assert {name for name, _, _ in tables} == {"directory_users", "members", "attendance_records", "notifications"}
    for name, _, options in tables:
        assert "COLLATE=utf8mb4_bin" in options, name
