from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..common.pagination import PaginatedResult, Pagination
from ..core.enums import AttendanceStatus
from ..database.fallback import FallbackRepository
from .model import AttendanceRecord
from .repository import AttendanceFilters, AttendanceRepository


class ResilientAttendanceRepository(FallbackRepository[AttendanceRepository], AttendanceRepository):
    def __init__(self, durable: AttendanceRepository, volatile: AttendanceRepository):
        super().__init__(durable, volatile, name="attendance")

    def find_all(
        self,
        filters: Optional[AttendanceFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[AttendanceRecord]:
        return self._run("find_all", filters, pagination)

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        return self._run("get_by_id", attendance_id)

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
        return self._run(
            "create",
            member_id=member_id,
            member_name=member_name,
            branch_id=branch_id,
            check_in_time=check_in_time,
            method=method,
            status=status,
            device_id=device_id,
        )

    def check_out(self, attendance_id: str, check_out_time: datetime) -> Optional[AttendanceRecord]:
        closed = self._run("check_out", attendance_id, check_out_time)
        if closed is None:
            # The open visit may have been written to the record store during
            # an outage; MySQL then matches no row without raising.
            closed = self.volatile.check_out(attendance_id, check_out_time)
        return closed

    def update(self, attendance_id: str, /, **changes: Any) -> Optional[AttendanceRecord]:
        return self._run("update", attendance_id, **changes)

    def delete(self, attendance_id: str) -> bool:
        return self._run("delete", attendance_id)
