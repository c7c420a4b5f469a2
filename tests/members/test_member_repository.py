from __future__ import annotations

from datetime import datetime

import pytest

from gym_checkin.common.pagination import Pagination
from gym_checkin.core.enums import MemberStatus
from gym_checkin.core.exceptions import ValidationError
from gym_checkin.members.repository import MemberFilters


def _create(repos, name, **overrides):
    fields = dict(
        name=name,
        phone="+1555123456",
        email=f"{name.split()[0].lower()}@example.com",
        branch_id="B1",
        plan="Gold Premium",
        status=MemberStatus.ACTIVE,
        expiry_date="2027-01-01T00:00:00Z",
    )
    fields.update(overrides)
    return repos.members.create(**fields)


def test_create_generates_id_and_timestamps(repos):
    member = _create(repos, "Dana Scully")

    assert member.member_id.startswith("MEM_")
    assert member.created_at is not None and member.created_at == member.updated_at
    assert isinstance(member.expiry_date, datetime)
    assert repos.members.get_by_id(member.member_id) == member


def test_newest_members_come_first(repos):
    newest = _create(repos, "Fox Mulder")

    ids = [m.member_id for m in repos.members.find_all().data]

    assert ids[0] == newest.member_id
    assert ids[1:] == ["M4", "M3", "M2", "M1"]


def test_search_matches_name_email_or_phone_case_insensitively(repos):
    dana = _create(repos, "Dana Scully", phone="+1999000111")

    assert [m.member_id for m in repos.members.find_all(MemberFilters(search="SCUL")).data] == [dana.member_id]
    assert [m.member_id for m in repos.members.find_all(MemberFilters(search="999000")).data] == [dana.member_id]
    assert repos.members.find_all(MemberFilters(search="dana@EXAMPLE")).total == 1


def test_plan_and_status_filters(repos):
    _create(repos, "Dana Scully", plan="Silver Monthly")

    assert repos.members.find_all(MemberFilters(plan="silver")).total == 1
    assert repos.members.find_all(MemberFilters(status=MemberStatus.EXPIRED)).total == 1
    assert repos.members.find_all(MemberFilters(branch_id="B2")).total == 1


def test_find_by_branch(repos):
    assert sorted(m.member_id for m in repos.members.find_by_branch("B1")) == ["M1", "M2", "M3"]


def test_update_ignores_identity_and_rejects_unknown_fields(repos):
    updated = repos.members.update("M1", member_id="X", status="Frozen")

    assert updated.member_id == "M1"
    assert updated.status == MemberStatus.FROZEN
    with pytest.raises(ValidationError):
        repos.members.update("M1", favourite_colour="blue")
    assert repos.members.update("NOPE", status="Active") is None


def test_delete(repos):
    assert repos.members.delete("M4")
    assert not repos.members.delete("M4")
    assert repos.members.find_all(pagination=Pagination(page=1, page_size=2)).total == 3
