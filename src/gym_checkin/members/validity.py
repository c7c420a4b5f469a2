"""Membership validity check used at the door.

Pure functions of the member and the current time; never cached, since the
answer changes as the clock passes the expiry.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local, parse_timestamp
from ..core.enums import MemberStatus
from .model import Member

logger = logging.getLogger(__name__)


def is_expired_by_date(member: Member, *, now: Optional[datetime] = None) -> bool:
    """True only when the expiry parses and lies strictly in the past."""
    expiry = parse_timestamp(member.expiry_date)
    if expiry is None:
        return False
    return expiry < (now or now_local())


def is_admissible(member: Member, *, now: Optional[datetime] = None, fail_open: bool = True) -> bool:
    """Whether ``member`` may enter.

    Requires ``status == Active`` and an expiry that is not in the past. An
    expiry that cannot be parsed admits the member when ``fail_open`` is set
    and refuses otherwise.
    """

    if member.status != MemberStatus.ACTIVE:
        return False

    expiry = parse_timestamp(member.expiry_date)
    if expiry is None:
        logger.warning(
            "Member %s has unparsable expiry %r; %s",
            member.member_id,
            member.expiry_date,
            "admitting" if fail_open else "refusing",
        )
        return fail_open

    return expiry >= (now or now_local())
