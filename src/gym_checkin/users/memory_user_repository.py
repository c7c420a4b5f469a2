from __future__ import annotations

import dataclasses
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.identifiers import generate_id
from ..common.pagination import PaginatedResult, Pagination, paginate
from ..common.validators import clean_changes
from ..core.constants import USER_ID_PREFIX
from ..core.enums import Role
from ..database.store import RecordStore
from .model import DirectoryUser
from .repository import UserFilters, UserRepository

MUTABLE_FIELDS = ("name", "email", "role", "branch_id")
IMMUTABLE_FIELDS = ("user_id", "created_at")


class InMemoryUserRepository(UserRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def find_all(
        self,
        filters: Optional[UserFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[DirectoryUser]:
        filters = filters or UserFilters()
        with self._store.lock:
            items = [
                u
                for u in self._store.users
                if (not filters.role or u.role == Role(filters.role))
                and (not filters.branch_id or u.branch_id == filters.branch_id)
            ]
        # Code-point order, as the binary collation in schema.sql.
        items.sort(key=lambda u: (u.name, u.user_id))
        return paginate(items, pagination)

    def get_by_id(self, user_id: str) -> Optional[DirectoryUser]:
        with self._store.lock:
            return next((u for u in self._store.users if u.user_id == user_id), None)

    def find_by_branch(self, branch_id: str) -> Sequence[DirectoryUser]:
        return self.find_all(UserFilters(branch_id=branch_id)).data

    def create(self, *, name: str, email: str, role: Role, branch_id: Optional[str] = None) -> DirectoryUser:
        user = DirectoryUser(
            user_id=generate_id(USER_ID_PREFIX),
            name=name,
            email=email.lower(),
            role=Role(role),
            branch_id=branch_id,
            created_at=now_local(),
        )
        with self._store.lock:
            self._store.users.append(user)
        return user

    def update(self, user_id: str, /, **changes: Any) -> Optional[DirectoryUser]:
        changes = clean_changes(changes, mutable=MUTABLE_FIELDS, immutable=IMMUTABLE_FIELDS)
        if "role" in changes:
            changes["role"] = Role(changes["role"])
        with self._store.lock:
            users = self._store.users
            for idx, current in enumerate(users):
                if current.user_id == user_id:
                    users[idx] = dataclasses.replace(current, **changes)
                    return users[idx]
        return None

    def delete(self, user_id: str) -> bool:
        with self._store.lock:
            users = self._store.users
            before = len(users)
            users[:] = [u for u in users if u.user_id != user_id]
            return len(users) < before
