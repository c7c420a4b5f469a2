from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..common.identifiers import generate_id
from ..common.pagination import PaginatedResult, Pagination
from ..common.validators import clean_changes
from ..core.constants import ATTENDANCE_ID_PREFIX
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, select_page
from .memory_attendance_repository import IMMUTABLE_FIELDS, MUTABLE_FIELDS
from .model import AttendanceRecord
from .repository import AttendanceFilters, AttendanceRepository

COLUMNS = (
    "attendance_id, member_id, member_name, branch_id, work_date, "
    "check_in_time, check_out_time, method, status, device_id"
)
ORDER_BY = "check_in_time DESC, attendance_id DESC"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=str(r["attendance_id"]),
        member_id=str(r["member_id"]),
        member_name=r["member_name"],
        branch_id=str(r["branch_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        method=r["method"],
        status=AttendanceStatus(r["status"]),
        device_id=r.get("device_id"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_all(
        self,
        filters: Optional[AttendanceFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[AttendanceRecord]:
        filters = filters or AttendanceFilters()
        clauses: list[str] = []
        params: list[object] = []

        if filters.branch_id:
            clauses.append("branch_id=%s")
            params.append(filters.branch_id)
        if filters.member_id:
            clauses.append("member_id=%s")
            params.append(filters.member_id)
        if filters.date:
            clauses.append("work_date=%s")
            params.append(filters.date)
        if filters.status:
            clauses.append("status=%s")
            params.append(AttendanceStatus(filters.status).value)
        if filters.open_only:
            clauses.append("check_out_time IS NULL")

        with db_cursor(self._conn_factory) as (_, cur):
            return select_page(
                cur,
                table="attendance_records",
                columns=COLUMNS,
                clauses=clauses,
                params=params,
                order_by=ORDER_BY,
                pagination=pagination,
                row_mapper=_to_record,
            )

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {COLUMNS} FROM attendance_records WHERE attendance_id=%s", (attendance_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance_records({COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.attendance_id,
                    record.member_id,
                    record.member_name,
                    record.branch_id,
                    record.work_date,
                    record.check_in_time,
                    None,
                    record.method,
                    record.status.value,
                    record.device_id,
                ),
            )
        return record

    def check_out(self, attendance_id: str, check_out_time: datetime) -> Optional[AttendanceRecord]:
        return self.update(attendance_id, check_out_time=check_out_time)

    def update(self, attendance_id: str, /, **changes: Any) -> Optional[AttendanceRecord]:
        changes = clean_changes(changes, mutable=MUTABLE_FIELDS, immutable=IMMUTABLE_FIELDS)
        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                assignments = ", ".join(f"{column}=%s" for column in changes)
                cur.execute(
                    f"UPDATE attendance_records SET {assignments} WHERE attendance_id=%s AND status=%s",
                    tuple(changes.values()) + (attendance_id, AttendanceStatus.SUCCESS.value),
                )
            cur.execute(f"SELECT {COLUMNS} FROM attendance_records WHERE attendance_id=%s", (attendance_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def delete(self, attendance_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (attendance_id,))
            return cur.rowcount > 0
