from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, List, Optional

from ..common.datetime_utils import format_timestamp, now_local
from ..common.locks import KeyedLock
from ..common.pagination import PaginatedResult, Pagination
from ..common.validators import require_positive_int
from ..core.constants import (
    DEFAULT_RECENT_LIMIT,
    ERR_MEMBER_NOT_FOUND,
    ERR_SUBSCRIPTION_EXPIRED,
    ERR_WRONG_BRANCH,
    MSG_CHECKED_IN,
    MSG_CHECKED_OUT,
)
from ..core.enums import AttendanceStatus
from ..members.model import Member
from ..members.repository import MemberRepository
from ..members.validity import is_admissible, is_expired_by_date
from ..notifications import templates
from ..notifications.dispatcher import NotificationDispatcher
from .model import AttendanceRecord, attendance_to_dict
from .repository import AttendanceFilters, AttendanceRepository
from .session import DaySession, OpenSession, resolve_day_session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInResult:
    success: bool
    data: Optional[AttendanceRecord] = None
    message: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict = {"success": self.success}
        if self.data is not None:
            out["data"] = attendance_to_dict(self.data)
        if self.message is not None:
            out["message"] = self.message
        if self.error is not None:
            out["error"] = self.error
        return out


class AttendanceService:
    """Door check-in engine.

    One call per scan. There is no intent flag: the first successful scan of
    the day opens a visit, the next one closes it. Denied scans are still
    recorded (status ``failed``) and reported to the branch admins.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        members: MemberRepository,
        dispatcher: NotificationDispatcher,
        *,
        fail_open: bool = True,
        locks: Optional[KeyedLock] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._members = members
        self._dispatcher = dispatcher
        self._fail_open = bool(fail_open)
        self._locks = locks or KeyedLock()
        self._clock = clock

    def check_in(
        self,
        member_id: str,
        branch_id: str,
        method: str,
        device_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> CheckInResult:
        pinned = now is not None
        now = now or self._clock()

        member = self._members.get_by_id(member_id)
        if not member:
            return CheckInResult(success=False, error=ERR_MEMBER_NOT_FOUND)
        if member.branch_id != branch_id:
            return CheckInResult(success=False, error=ERR_WRONG_BRANCH)

        if not is_admissible(member, now=now, fail_open=self._fail_open):
            return self._deny(member, branch_id, method, device_id, now)

        # Read-decide-write for one member must not interleave with another
        # scan of the same member, or both could open a visit.
        with self._locks.hold(member_id):
            if not pinned:
                # Stamp under the lock so one member's scans get increasing times.
                now = self._clock()
            session = self.day_session(member_id, now.date())
            if isinstance(session, OpenSession):
                closed = self._attendance.check_out(session.record.attendance_id, now)
                if closed is not None:
                    logger.info("Member %s checked out (%s)", member_id, closed.attendance_id)
                    return CheckInResult(success=True, data=closed, message=MSG_CHECKED_OUT)
                logger.warning(
                    "Open visit %s for member %s vanished before check-out; opening a new one",
                    session.record.attendance_id,
                    member_id,
                )
            return self._open_visit(member, branch_id, method, device_id, now)

    def day_session(self, member_id: str, day: date) -> DaySession:
        records = self._attendance.find_all(
            AttendanceFilters(member_id=member_id, date=day, status=AttendanceStatus.SUCCESS)
        ).data
        return resolve_day_session(records, day)

    def _open_visit(
        self,
        member: Member,
        branch_id: str,
        method: str,
        device_id: Optional[str],
        now: datetime,
    ) -> CheckInResult:
        record = self._attendance.create(
            member_id=member.member_id,
            member_name=member.name,
            branch_id=branch_id,
            check_in_time=now,
            method=method,
            status=AttendanceStatus.SUCCESS,
            device_id=device_id,
        )

        try:
            self._members.update(member.member_id, last_visit=record.check_in_time)
        except Exception:
            logger.exception("Failed to update last visit for member %s", member.member_id)

        self._dispatcher.notify_template(
            member.member_id,
            templates.member_check_in(member.name, branch_id),
            data={"attendanceId": record.attendance_id, "method": method},
            branch_id=branch_id,
        )
        logger.info("Member %s checked in (%s)", member.member_id, record.attendance_id)
        return CheckInResult(success=True, data=record, message=MSG_CHECKED_IN)

    def _deny(
        self,
        member: Member,
        branch_id: str,
        method: str,
        device_id: Optional[str],
        now: datetime,
    ) -> CheckInResult:
        record = self._attendance.create(
            member_id=member.member_id,
            member_name=member.name,
            branch_id=branch_id,
            check_in_time=now,
            method=method,
            status=AttendanceStatus.FAILED,
            device_id=device_id,
        )

        expiry = member.expiry_date
        self._dispatcher.notify_branch_admins(
            branch_id,
            templates.membership_expired(member.name),
            data={
                "memberId": member.member_id,
                "memberName": member.name,
                "memberStatus": member.status.value,
                "expiryDate": format_timestamp(expiry) if isinstance(expiry, datetime) else expiry,
                "isExpiredByDate": is_expired_by_date(member, now=now),
                "attendanceId": record.attendance_id,
                "method": method,
                "deviceId": device_id,
            },
        )
        logger.info("Member %s denied entry at %s (status=%s)", member.member_id, branch_id, member.status.value)
        return CheckInResult(success=False, data=record, error=ERR_SUBSCRIPTION_EXPIRED)

    def get_attendance(
        self,
        filters: Optional[AttendanceFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[AttendanceRecord]:
        return self._attendance.find_all(filters, pagination)

    def get_live_count(self, branch_id: str, *, today: Optional[date] = None) -> int:
        """Members currently inside: today's open visits at ``branch_id``."""
        today = today or self._clock().date()
        return self._attendance.find_all(
            AttendanceFilters(branch_id=branch_id, date=today, status=AttendanceStatus.SUCCESS, open_only=True),
            Pagination(page=1, page_size=1),
        ).total

    def get_today_count(self, branch_id: str, *, today: Optional[date] = None) -> int:
        today = today or self._clock().date()
        return self._attendance.find_all(
            AttendanceFilters(branch_id=branch_id, date=today, status=AttendanceStatus.SUCCESS),
            Pagination(page=1, page_size=1),
        ).total

    def get_recent_check_ins(self, branch_id: str, limit: int = DEFAULT_RECENT_LIMIT) -> List[AttendanceRecord]:
        limit = require_positive_int(limit, "limit")
        return self._attendance.find_all(
            AttendanceFilters(branch_id=branch_id),
            Pagination(page=1, page_size=limit),
        ).data
