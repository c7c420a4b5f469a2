"""Per-member, per-day visit state.

A member's successful records for one calendar day collapse into a single
tagged value that the check-in flow dispatches on:

    NoSession -> OpenSession (scan in) -> ClosedSession (scan out)

A scan while Closed starts a new visit. Failed records are ignored here.
Records from earlier days never match, so a visit left open yesterday stays
open and does not block today's first scan.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Union

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


@dataclass(frozen=True)
class NoSession:
    pass


@dataclass(frozen=True)
class OpenSession:
    record: AttendanceRecord


@dataclass(frozen=True)
class ClosedSession:
    record: AttendanceRecord


DaySession = Union[NoSession, OpenSession, ClosedSession]


def resolve_day_session(records: Iterable[AttendanceRecord], day: date) -> DaySession:
    todays = [r for r in records if r.status == AttendanceStatus.SUCCESS and r.work_date == day]
    if not todays:
        return NoSession()

    open_records = [r for r in todays if r.check_out_time is None]
    if open_records:
        return OpenSession(max(open_records, key=lambda r: (r.check_in_time, r.attendance_id)))
    return ClosedSession(max(todays, key=lambda r: (r.check_in_time, r.attendance_id)))
