from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, List, Optional, Sequence, Union

from ..common.datetime_utils import now_local
from ..common.identifiers import generate_id
from ..common.pagination import PaginatedResult, Pagination, paginate
from ..common.validators import clean_changes
from ..core.constants import MEMBER_ID_PREFIX
from ..core.enums import MemberStatus
from ..database.store import RecordStore
from .model import Member, coerce_expiry
from .repository import MemberFilters, MemberRepository

MUTABLE_FIELDS = ("name", "phone", "email", "branch_id", "plan", "status", "expiry_date", "last_visit")
IMMUTABLE_FIELDS = ("member_id", "created_at", "updated_at")


def _contains(haystack: Optional[str], needle: str) -> bool:
    # Same folding as LOWER() on the MySQL side.
    return needle.lower() in (haystack or "").lower()


def matches(member: Member, filters: MemberFilters) -> bool:
    if filters.branch_id and member.branch_id != filters.branch_id:
        return False
    if filters.status and member.status != MemberStatus(filters.status):
        return False
    if filters.plan and not _contains(member.plan, filters.plan):
        return False
    if filters.search:
        term = filters.search
        if not (_contains(member.name, term) or _contains(member.email, term) or _contains(member.phone, term)):
            return False
    return True


def sort_key(member: Member):
    return (member.created_at or datetime.min, member.member_id)


class InMemoryMemberRepository(MemberRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def find_all(
        self,
        filters: Optional[MemberFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[Member]:
        filters = filters or MemberFilters()
        with self._store.lock:
            items = [m for m in self._store.members if matches(m, filters)]
        items.sort(key=sort_key, reverse=True)
        return paginate(items, pagination)

    def get_by_id(self, member_id: str) -> Optional[Member]:
        with self._store.lock:
            return next((m for m in self._store.members if m.member_id == member_id), None)

    def find_by_branch(self, branch_id: str) -> Sequence[Member]:
        return self.find_all(MemberFilters(branch_id=branch_id)).data

    def create(
        self,
        *,
        name: str,
        phone: str,
        email: str,
        branch_id: str,
        plan: str,
        status: MemberStatus,
        expiry_date: Union[datetime, str, None],
        last_visit: Optional[datetime] = None,
    ) -> Member:
        now = now_local()
        member = Member(
            member_id=generate_id(MEMBER_ID_PREFIX),
            name=name,
            phone=phone,
            email=email,
            branch_id=branch_id,
            plan=plan,
            status=MemberStatus(status),
            expiry_date=coerce_expiry(expiry_date),
            last_visit=last_visit,
            created_at=now,
            updated_at=now,
        )
        with self._store.lock:
            self._store.members.append(member)
        return member

    def update(self, member_id: str, /, **changes: Any) -> Optional[Member]:
        changes = clean_changes(changes, mutable=MUTABLE_FIELDS, immutable=IMMUTABLE_FIELDS)
        if "status" in changes:
            changes["status"] = MemberStatus(changes["status"])
        if "expiry_date" in changes:
            changes["expiry_date"] = coerce_expiry(changes["expiry_date"])

        with self._store.lock:
            members: List[Member] = self._store.members
            for idx, current in enumerate(members):
                if current.member_id == member_id:
                    updated = dataclasses.replace(current, updated_at=now_local(), **changes)
                    members[idx] = updated
                    return updated
        return None

    def delete(self, member_id: str) -> bool:
        with self._store.lock:
            members = self._store.members
            before = len(members)
            members[:] = [m for m in members if m.member_id != member_id]
            return len(members) < before
