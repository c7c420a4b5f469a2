from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_timestamp, parse_iso_date, parse_timestamp
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one door scan.

    A successful record with ``check_out_time`` unset is an open session.
    ``check_out_time`` is the only field that changes after creation, and a
    failed record never gets one.
    """

    attendance_id: str
    member_id: str
    member_name: str
    branch_id: str
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    method: str
    status: AttendanceStatus
    device_id: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == AttendanceStatus.SUCCESS and self.check_out_time is None


def attendance_to_dict(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "memberId": r.member_id,
        "memberName": r.member_name,
        "branchId": r.branch_id,
        "date": r.work_date.isoformat(),
        "checkInTime": format_timestamp(r.check_in_time),
        "checkOutTime": format_timestamp(r.check_out_time),
        "method": r.method,
        "status": r.status.value,
        "deviceId": r.device_id,
    }


def attendance_from_dict(d: dict) -> AttendanceRecord:
    check_in = parse_timestamp(d["checkInTime"])
    return AttendanceRecord(
        attendance_id=str(d["id"]),
        member_id=str(d["memberId"]),
        member_name=d.get("memberName") or "",
        branch_id=str(d["branchId"]),
        work_date=parse_iso_date(d["date"]) if d.get("date") else check_in.date(),
        check_in_time=check_in,
        check_out_time=parse_timestamp(d.get("checkOutTime")),
        method=d.get("method") or "",
        status=AttendanceStatus(d["status"]),
        device_id=d.get("deviceId"),
    )
