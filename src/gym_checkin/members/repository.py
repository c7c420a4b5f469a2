from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Protocol, Sequence, Union

from ..common.pagination import PaginatedResult, Pagination
from ..core.enums import MemberStatus
from .model import Member


@dataclass(frozen=True)
class MemberFilters:
    branch_id: Optional[str] = None
    status: Optional[MemberStatus] = None
    plan: Optional[str] = None
    search: Optional[str] = None


class MemberRepository(Protocol):
    """Repository contract for Member.

    Note (DIP): services depend on this interface, never on a concrete store.
    Results are ordered newest first (``created_at`` desc, then id desc).
    """

    def find_all(
        self,
        filters: Optional[MemberFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[Member]:
        raise NotImplementedError

    def get_by_id(self, member_id: str) -> Optional[Member]:
        raise NotImplementedError

    def find_by_branch(self, branch_id: str) -> Sequence[Member]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, member_id: str, /, **changes: Any) -> Optional[Member]:
        """Apply a partial update; ``member_id`` and ``created_at`` are immutable."""

        raise NotImplementedError

    def delete(self, member_id: str) -> bool:
        raise NotImplementedError
