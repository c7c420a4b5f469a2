from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from gym_checkin.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from gym_checkin.attendance.service import AttendanceService
from gym_checkin.core.enums import MemberStatus, Role
from gym_checkin.database.store import RecordStore
from gym_checkin.members.memory_member_repository import InMemoryMemberRepository
from gym_checkin.members.model import Member
from gym_checkin.notifications.dispatcher import NotificationDispatcher
from gym_checkin.notifications.memory_notification_repository import InMemoryNotificationRepository
from gym_checkin.users.memory_user_repository import InMemoryUserRepository
from gym_checkin.users.model import DirectoryUser


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 8, 0, 0)


def _member(member_id: str, *, status=MemberStatus.ACTIVE, expiry=None, branch_id: str = "B1", name=None) -> Member:
    return Member(
        member_id=member_id,
        name=name or f"Member {member_id}",
        phone="+1555000000",
        email=f"{member_id.lower()}@example.com",
        branch_id=branch_id,
        plan="Standard",
        status=status,
        expiry_date=expiry,
        created_at=datetime(2025, 1, 1),
        updated_at=datetime(2025, 1, 1),
    )


@pytest.fixture
def make_member():
    return _member


@pytest.fixture
def store(fixed_now) -> RecordStore:
    s = RecordStore()
    s.members.extend(
        [
            _member("M1", expiry=fixed_now + timedelta(days=1)),
            _member("M2", status=MemberStatus.EXPIRED, expiry=fixed_now - timedelta(days=3)),
            _member("M3", expiry=fixed_now - timedelta(minutes=1)),
            _member("M4", branch_id="B2", expiry=fixed_now + timedelta(days=30)),
        ]
    )
    s.users.extend(
        [
            DirectoryUser("U1", "Branch One Admin", "a1@gym.test", Role.BRANCH_ADMIN, "B1"),
            DirectoryUser("U2", "Branch One Second Admin", "a2@gym.test", Role.BRANCH_ADMIN, "B1"),
            DirectoryUser("U3", "Branch Two Admin", "a3@gym.test", Role.BRANCH_ADMIN, "B2"),
            DirectoryUser("U4", "Owner", "owner@gym.test", Role.SUPER_ADMIN, None),
            DirectoryUser("U5", "Front Desk Member", "m@gym.test", Role.MEMBER, "B1"),
        ]
    )
    return s


@pytest.fixture
def repos(store):
    return SimpleNamespace(
        members=InMemoryMemberRepository(store),
        users=InMemoryUserRepository(store),
        notifications=InMemoryNotificationRepository(store),
        attendance=InMemoryAttendanceRepository(store),
    )


@pytest.fixture
def service(repos) -> AttendanceService:
    dispatcher = NotificationDispatcher(repos.notifications, repos.users)
    return AttendanceService(repos.attendance, repos.members, dispatcher)
