from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_timestamp, parse_timestamp
from ..core.enums import Role


@dataclass(frozen=True)
class DirectoryUser:
    """Domain entity: a staff or portal account.

    Note: Read-only from the check-in flow; used to find who to alert.
    """

    user_id: str
    name: str
    email: str
    role: Role
    branch_id: Optional[str]
    created_at: Optional[datetime] = None


def user_to_dict(u: DirectoryUser) -> dict:
    return {
        "id": u.user_id,
        "name": u.name,
        "email": u.email,
        "role": u.role.value,
        "branchId": u.branch_id,
        "createdAt": format_timestamp(u.created_at),
    }


def user_from_dict(d: dict) -> DirectoryUser:
    return DirectoryUser(
        user_id=str(d["id"]),
        name=d["name"],
        email=d.get("email") or "",
        role=Role(d["role"]),
        branch_id=d.get("branchId"),
        created_at=parse_timestamp(d.get("createdAt")),
    )
