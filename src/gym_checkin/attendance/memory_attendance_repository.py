from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, Optional

from ..common.identifiers import generate_id
from ..common.pagination import PaginatedResult, Pagination, paginate
from ..common.validators import clean_changes
from ..core.constants import ATTENDANCE_ID_PREFIX
from ..core.enums import AttendanceStatus
from ..database.store import RecordStore
from .model import AttendanceRecord
from .repository import AttendanceFilters, AttendanceRepository

# Only the check-out time may change after a record is written.
MUTABLE_FIELDS = ("check_out_time",)
IMMUTABLE_FIELDS = (
    "attendance_id",
    "member_id",
    "member_name",
    "branch_id",
    "work_date",
    "check_in_time",
    "method",
    "status",
    "device_id",
)


def matches(record: AttendanceRecord, filters: AttendanceFilters) -> bool:
    if filters.branch_id and record.branch_id != filters.branch_id:
        return False
    if filters.member_id and record.member_id != filters.member_id:
        return False
    if filters.date and record.work_date != filters.date:
        return False
    if filters.status and record.status != AttendanceStatus(filters.status):
        return False
    if filters.open_only and record.check_out_time is not None:
        return False
    return True


class InMemoryAttendanceRepository(AttendanceRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def find_all(
        self,
        filters: Optional[AttendanceFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[AttendanceRecord]:
        filters = filters or AttendanceFilters()
        with self._store.lock:
            items = [r for r in self._store.attendance if matches(r, filters)]
        items.sort(key=lambda r: (r.check_in_time, r.attendance_id), reverse=True)
        return paginate(items, pagination)

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        with self._store.lock:
            return next((r for r in self._store.attendance if r.attendance_id == attendance_id), None)

    def create(
        self,
        *,
        member_id: str,
        member_name: str,
        branch_id: str,
        check_in_time: datetime,
        method: str,
        status: AttendanceStatus,
        device_id: Optional[str] = None,
    ) -> AttendanceRecord:
        record = AttendanceRecord(
            attendance_id=generate_id(ATTENDANCE_ID_PREFIX),
            member_id=member_id,
            member_name=member_name,
            branch_id=branch_id,
            work_date=check_in_time.date(),
            check_in_time=check_in_time,
            check_out_time=None,
            method=method,
            status=AttendanceStatus(status),
            device_id=device_id,
        )
        with self._store.lock:
            self._store.attendance.append(record)
        return record

    def check_out(self, attendance_id: str, check_out_time: datetime) -> Optional[AttendanceRecord]:
        return self.update(attendance_id, check_out_time=check_out_time)

    def update(self, attendance_id: str, /, **changes: Any) -> Optional[AttendanceRecord]:
        changes = clean_changes(changes, mutable=MUTABLE_FIELDS, immutable=IMMUTABLE_FIELDS)
        with self._store.lock:
            records = self._store.attendance
            for idx, current in enumerate(records):
                if current.attendance_id == attendance_id:
                    if current.status == AttendanceStatus.FAILED:
                        return current
                    records[idx] = dataclasses.replace(current, **changes)
                    return records[idx]
        return None

    def delete(self, attendance_id: str) -> bool:
        with self._store.lock:
            records = self._store.attendance
            before = len(records)
            records[:] = [r for r in records if r.attendance_id != attendance_id]
            return len(records) < before
