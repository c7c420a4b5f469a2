from __future__ import annotations

from datetime import date, datetime

import pytest

from gym_checkin.attendance.repository import AttendanceFilters
from gym_checkin.common.pagination import Pagination
from gym_checkin.core.enums import AttendanceStatus
from gym_checkin.core.exceptions import ValidationError


def _scan(repos, member_id, at, status=AttendanceStatus.SUCCESS, branch_id="B1"):
    return repos.attendance.create(
        member_id=member_id,
        member_name=member_id,
        branch_id=branch_id,
        check_in_time=at,
        method="QR",
        status=status,
    )


def test_records_are_newest_first_and_filterable(repos):
    a = _scan(repos, "M1", datetime(2026, 1, 31, 9, 0))
    b = _scan(repos, "M2", datetime(2026, 2, 1, 7, 0), status=AttendanceStatus.FAILED)
    c = _scan(repos, "M1", datetime(2026, 2, 1, 8, 0), branch_id="B2")

    assert [r.attendance_id for r in repos.attendance.find_all().data] == [c.attendance_id, b.attendance_id, a.attendance_id]
    assert repos.attendance.find_all(AttendanceFilters(date=date(2026, 2, 1))).total == 2
    assert repos.attendance.find_all(AttendanceFilters(branch_id="B1", status="success")).data == [a]
    assert repos.attendance.find_all(AttendanceFilters(member_id="M1"), Pagination(page=2, page_size=1)).data == [a]


def test_check_out_sets_time_once_and_closes_session(repos):
    rec = _scan(repos, "M1", datetime(2026, 2, 1, 7, 0))

    closed = repos.attendance.check_out(rec.attendance_id, datetime(2026, 2, 1, 8, 30))

    assert closed.check_out_time == datetime(2026, 2, 1, 8, 30)
    assert not closed.is_open
    assert repos.attendance.find_all(AttendanceFilters(open_only=True)).total == 0


def test_failed_records_never_get_a_check_out(repos):
    failed = _scan(repos, "M2", datetime(2026, 2, 1, 7, 0), status=AttendanceStatus.FAILED)

    unchanged = repos.attendance.check_out(failed.attendance_id, datetime(2026, 2, 1, 8, 0))

    assert unchanged == failed
    assert unchanged.check_out_time is None


def test_only_check_out_time_is_mutable(repos):
    rec = _scan(repos, "M1", datetime(2026, 2, 1, 7, 0))

    assert repos.attendance.update(rec.attendance_id, attendance_id="ATT_OTHER", member_id="M9") == rec
    with pytest.raises(ValidationError):
        repos.attendance.update(rec.attendance_id, notes="late")
    assert repos.attendance.check_out("ATT_MISSING", datetime(2026, 2, 1, 8, 0)) is None
