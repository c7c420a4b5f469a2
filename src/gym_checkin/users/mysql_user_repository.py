from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.identifiers import generate_id
from ..common.pagination import PaginatedResult, Pagination
from ..common.validators import clean_changes
from ..core.constants import USER_ID_PREFIX
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, select_page
from .memory_user_repository import IMMUTABLE_FIELDS, MUTABLE_FIELDS
from .model import DirectoryUser
from .repository import UserFilters, UserRepository

COLUMNS = "user_id, name, email, role, branch_id, created_at"
ORDER_BY = "name ASC, user_id ASC"


def _to_user(r: Dict[str, Any]) -> DirectoryUser:
    return DirectoryUser(
        user_id=str(r["user_id"]),
        name=r["name"],
        email=r.get("email") or "",
        role=Role(r["role"]),
        branch_id=r.get("branch_id"),
        created_at=r.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_all(
        self,
        filters: Optional[UserFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[DirectoryUser]:
        filters = filters or UserFilters()
        clauses: list[str] = []
        params: list[object] = []
        if filters.role:
            clauses.append("role=%s")
            params.append(Role(filters.role).value)
        if filters.branch_id:
            clauses.append("branch_id=%s")
            params.append(filters.branch_id)

        with db_cursor(self._conn_factory) as (_, cur):
            return select_page(
                cur,
                table="directory_users",
                columns=COLUMNS,
                clauses=clauses,
                params=params,
                order_by=ORDER_BY,
                pagination=pagination,
                row_mapper=_to_user,
            )

    def get_by_id(self, user_id: str) -> Optional[DirectoryUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {COLUMNS} FROM directory_users WHERE user_id=%s", (user_id,))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def find_by_branch(self, branch_id: str) -> Sequence[DirectoryUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {COLUMNS} FROM directory_users WHERE branch_id=%s ORDER BY {ORDER_BY}",
                (branch_id,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def create(self, *, name: str, email: str, role: Role, branch_id: Optional[str] = None) -> DirectoryUser:
        user = DirectoryUser(
            user_id=generate_id(USER_ID_PREFIX),
            name=name,
            email=email.lower(),
            role=Role(role),
            branch_id=branch_id,
            created_at=now_local(),
        )
        self.insert(user)
        return user

    def insert(self, user: DirectoryUser) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO directory_users({COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s)",
                (user.user_id, user.name, user.email, user.role.value, user.branch_id, user.created_at),
            )

    def update(self, user_id: str, /, **changes: Any) -> Optional[DirectoryUser]:
        changes = clean_changes(changes, mutable=MUTABLE_FIELDS, immutable=IMMUTABLE_FIELDS)
        if "role" in changes:
            changes["role"] = Role(changes["role"]).value

        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                assignments = ", ".join(f"{column}=%s" for column in changes)
                cur.execute(
                    f"UPDATE directory_users SET {assignments} WHERE user_id=%s",
                    tuple(changes.values()) + (user_id,),
                )
            cur.execute(f"SELECT {COLUMNS} FROM directory_users WHERE user_id=%s", (user_id,))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def delete(self, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM directory_users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0
