from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from ..common.datetime_utils import format_timestamp, parse_timestamp
from ..core.enums import MemberStatus


@dataclass(frozen=True)
class Member:
    """Domain entity: a gym member.

    ``status`` is a cached flag and may disagree with ``expiry_date``; the
    validity check at check-in re-derives the truth from the expiry.
    ``expiry_date`` keeps the raw stored value when it is not a timestamp.
    """

    member_id: str
    name: str
    phone: str
    email: str
    branch_id: str
    plan: str
    status: MemberStatus
    expiry_date: Union[datetime, str, None]
    last_visit: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def coerce_expiry(value: Any) -> Union[datetime, str, None]:
    parsed = parse_timestamp(value)
    if parsed is not None:
        return parsed
    return None if value is None else str(value)


def member_to_dict(m: Member) -> dict:
    expiry = m.expiry_date
    return {
        "id": m.member_id,
        "name": m.name,
        "phone": m.phone,
        "email": m.email,
        "branchId": m.branch_id,
        "plan": m.plan,
        "status": m.status.value,
        "expiryDate": format_timestamp(expiry) if isinstance(expiry, datetime) else expiry,
        "lastVisit": format_timestamp(m.last_visit),
        "createdAt": format_timestamp(m.created_at),
        "updatedAt": format_timestamp(m.updated_at),
    }


def member_from_dict(d: dict) -> Member:
    return Member(
        member_id=str(d["id"]),
        name=d["name"],
        phone=d.get("phone") or "",
        email=d.get("email") or "",
        branch_id=str(d["branchId"]),
        plan=d.get("plan") or "",
        status=MemberStatus(d["status"]),
        expiry_date=coerce_expiry(d.get("expiryDate")),
        last_visit=parse_timestamp(d.get("lastVisit")),
        created_at=parse_timestamp(d.get("createdAt")),
        updated_at=parse_timestamp(d.get("updatedAt")),
    )
