from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Union

from ..common.datetime_utils import now_local
from ..common.identifiers import generate_id
from ..common.pagination import PaginatedResult, Pagination
from ..common.validators import clean_changes
from ..core.constants import MEMBER_ID_PREFIX
from ..core.enums import MemberStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_any_case, select_page
from .memory_member_repository import IMMUTABLE_FIELDS, MUTABLE_FIELDS
from .model import Member, coerce_expiry
from .repository import MemberFilters, MemberRepository

COLUMNS = "member_id, name, phone, email, branch_id, plan, status, expiry_date, last_visit, created_at, updated_at"
ORDER_BY = "created_at DESC, member_id DESC"


def _expiry_to_db(value: Union[datetime, str, None]) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _to_member(r: Dict[str, Any]) -> Member:
    return Member(
        member_id=str(r["member_id"]),
        name=r["name"],
        phone=r.get("phone") or "",
        email=r.get("email") or "",
        branch_id=str(r["branch_id"]),
        plan=r.get("plan") or "",
        status=MemberStatus(r["status"]),
        expiry_date=coerce_expiry(r.get("expiry_date")),
        last_visit=r.get("last_visit"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_all(
        self,
        filters: Optional[MemberFilters] = None,
        pagination: Optional[Pagination] = None,
    ) -> PaginatedResult[Member]:
        filters = filters or MemberFilters()
        clauses: list[str] = []
        params: list[object] = []

        if filters.branch_id:
            clauses.append("branch_id=%s")
            params.append(filters.branch_id)
        if filters.status:
            clauses.append("status=%s")
            params.append(MemberStatus(filters.status).value)
        if filters.plan:
            clauses.append("LOWER(plan) LIKE %s")
            params.append(like_any_case(filters.plan))
        if filters.search:
            clauses.append("(LOWER(name) LIKE %s OR LOWER(email) LIKE %s OR LOWER(phone) LIKE %s)")
            params.extend([like_any_case(filters.search)] * 3)

        with db_cursor(self._conn_factory) as (_, cur):
            return select_page(
                cur,
                table="members",
                columns=COLUMNS,
                clauses=clauses,
                params=params,
                order_by=ORDER_BY,
                pagination=pagination,
                row_mapper=_to_member,
            )

    def get_by_id(self, member_id: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {COLUMNS} FROM members WHERE member_id=%s", (member_id,))
            r = fetchone(cur)
            return _to_member(r) if r else None

    def find_by_branch(self, branch_id: str) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {COLUMNS} FROM members WHERE branch_id=%s ORDER BY {ORDER_BY}", (branch_id,))
            return [_to_member(r) for r in fetchall(cur)]

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
        self.insert(member)
        return member

    def insert(self, member: Member) -> None:
        """Write a fully built member (used by create and by seeding)."""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO members({COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    member.member_id,
                    member.name,
                    member.phone,
                    member.email,
                    member.branch_id,
                    member.plan,
                    member.status.value,
                    _expiry_to_db(member.expiry_date),
                    member.last_visit,
                    member.created_at,
                    member.updated_at,
                ),
            )

    def update(self, member_id: str, /, **changes: Any) -> Optional[Member]:
        changes = clean_changes(changes, mutable=MUTABLE_FIELDS, immutable=IMMUTABLE_FIELDS)
        if "status" in changes:
            changes["status"] = MemberStatus(changes["status"]).value
        if "expiry_date" in changes:
            changes["expiry_date"] = _expiry_to_db(coerce_expiry(changes["expiry_date"]))
        changes["updated_at"] = now_local()

        assignments = ", ".join(f"{column}=%s" for column in changes)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE members SET {assignments} WHERE member_id=%s",
                tuple(changes.values()) + (member_id,),
            )
            cur.execute(f"SELECT {COLUMNS} FROM members WHERE member_id=%s", (member_id,))
            r = fetchone(cur)
            return _to_member(r) if r else None

    def delete(self, member_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM members WHERE member_id=%s", (member_id,))
            return cur.rowcount > 0
