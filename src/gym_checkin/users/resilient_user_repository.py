from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.pagination import PaginatedResult, Pagination
from ..core.enums import Role
from ..database.fallback import FallbackRepository
from .model import DirectoryUser
from .repository import UserFilters, UserRepository


class ResilientUserRepository(FallbackRepository[UserRepository], UserRepository):
    def __init__(self, durable: UserRepository, volatile: UserRepository):
        super().__init__(durable, volatile, name="users")

    def find_all(
        self,
        filters: Optional[UserFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[DirectoryUser]:
        return self._run("find_all", filters, pagination)

    def get_by_id(self, user_id: str) -> Optional[DirectoryUser]:
        return self._run("get_by_id", user_id)

    def find_by_branch(self, branch_id: str) -> Sequence[DirectoryUser]:
        return self._run("find_by_branch", branch_id)

    def create(self, *, name: str, email: str, role: Role, branch_id: Optional[str] = None) -> DirectoryUser:
        return self._run("create", name=name, email=email, role=role, branch_id=branch_id)

    def update(self, user_id: str, /, **changes: Any) -> Optional[DirectoryUser]:
        return self._run("update", user_id, **changes)

    def delete(self, user_id: str) -> bool:
        return self._run("delete", user_id)
