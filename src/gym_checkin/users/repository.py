from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from ..common.pagination import PaginatedResult, Pagination
from ..core.enums import Role
from .model import DirectoryUser


@dataclass(frozen=True)
class UserFilters:
    role: Optional[Role] = None
    branch_id: Optional[str] = None


class UserRepository(Protocol):
    """Repository contract for directory users, ordered by name."""

    def find_all(
        self,
        filters: Optional[UserFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[DirectoryUser]:
        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[DirectoryUser]:
        raise NotImplementedError

    def find_by_branch(self, branch_id: str) -> Sequence[DirectoryUser]:
        raise NotImplementedError

    def create(self, *, name: str, email: str, role: Role, branch_id: Optional[str] = None) -> DirectoryUser:
        raise NotImplementedError

    def update(self, user_id: str, /, **changes: Any) -> Optional[DirectoryUser]:
        raise NotImplementedError

    def delete(self, user_id: str) -> bool:
        raise NotImplementedError
