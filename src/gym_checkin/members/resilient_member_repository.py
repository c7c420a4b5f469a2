from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence, Union

from ..common.pagination import PaginatedResult, Pagination
from ..core.enums import MemberStatus
from ..database.fallback import FallbackRepository
from .model import Member
from .repository import MemberFilters, MemberRepository


class ResilientMemberRepository(FallbackRepository[MemberRepository], MemberRepository):
    def __init__(self, durable: MemberRepository, volatile: MemberRepository):
        super().__init__(durable, volatile, name="members")

    def find_all(
        self,
        filters: Optional[MemberFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[Member]:
        return self._run("find_all", filters, pagination)

    def get_by_id(self, member_id: str) -> Optional[Member]:
        return self._run("get_by_id", member_id)

    def find_by_branch(self, branch_id: str) -> Sequence[Member]:
        return self._run("find_by_branch", branch_id)

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
        return self._run(
            "create",
            name=name,
            phone=phone,
            email=email,
            branch_id=branch_id,
            plan=plan,
            status=status,
            expiry_date=expiry_date,
            last_visit=last_visit,
        )

    def update(self, member_id: str, /, **changes: Any) -> Optional[Member]:
        return self._run("update", member_id, **changes)

    def delete(self, member_id: str) -> bool:
        return self._run("delete", member_id)
