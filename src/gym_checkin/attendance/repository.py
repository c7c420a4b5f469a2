from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Protocol

from ..common.pagination import PaginatedResult, Pagination
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


@dataclass(frozen=True)
class AttendanceFilters:
    branch_id: Optional[str] = None
    member_id: Optional[str] = None
    date: Optional[date] = None
    status: Optional[AttendanceStatus] = None
    open_only: bool = False


class AttendanceRepository(Protocol):
    """Repository contract for AttendanceRecord.

    Every implementation orders by ``check_in_time`` desc, ties by id desc.
    """

    def find_all(
        self,
        filters: Optional[AttendanceFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        raise NotImplementedError

    def check_out(self, attendance_id: str, check_out_time: datetime) -> Optional[AttendanceRecord]:
        """Close an open session. Returns None if the record is missing."""

        raise NotImplementedError

    def update(self, attendance_id: str, /, **changes: Any) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def delete(self, attendance_id: str) -> bool:
        raise NotImplementedError
