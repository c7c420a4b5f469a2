"""Demo data set shared by the volatile store and the MySQL bootstrap."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from ..common.datetime_utils import now_local
from ..core.enums import MemberStatus, Role
from ..members.model import Member
from ..users.model import DirectoryUser


@dataclass
class SeedData:
    users: List[DirectoryUser] = field(default_factory=list)
    members: List[Member] = field(default_factory=list)


def build_seed_data(now: Optional[datetime] = None) -> SeedData:
    now = now or now_local()
    created = datetime(2024, 1, 1)

    users = [
        DirectoryUser("USR_001", "Super Admin", "admin@smartfit.com", Role.SUPER_ADMIN, None, created),
        DirectoryUser("USR_002", "John Manager", "john@downtown.gym", Role.BRANCH_ADMIN, "BRN_001", created),
        DirectoryUser("USR_003", "Alex Johnson", "alex@example.com", Role.MEMBER, "BRN_001", created),
    ]
    members = [
        Member(
            member_id="MEM_001",
            name="Alex Johnson",
            phone="+1555000001",
            email="alex@example.com",
            branch_id="BRN_001",
            plan="Gold Premium",
            status=MemberStatus.ACTIVE,
            expiry_date=now + timedelta(days=365),
            created_at=created,
            updated_at=created,
        ),
        Member(
            member_id="MEM_002",
            name="Maria Garcia",
            phone="+1555000002",
            email="maria@example.com",
            branch_id="BRN_001",
            plan="Silver Monthly",
            status=MemberStatus.EXPIRED,
            expiry_date=now - timedelta(days=30),
            created_at=created + timedelta(days=31),
            updated_at=created + timedelta(days=31),
        ),
        Member(
            member_id="MEM_003",
            name="Steve Smith",
            phone="+1555000003",
            email="steve@example.com",
            branch_id="BRN_001",
            plan="Standard",
            status=MemberStatus.ACTIVE,
            expiry_date=now + timedelta(days=30),
            created_at=created + timedelta(days=60),
            updated_at=created + timedelta(days=60),
        ),
    ]
    return SeedData(users=users, members=members)
