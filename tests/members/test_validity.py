from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from gym_checkin.core.enums import MemberStatus
from gym_checkin.members.validity import is_admissible, is_expired_by_date


def test_active_member_with_future_expiry_is_admissible(make_member, fixed_now):
    member = make_member("M1", expiry=fixed_now + timedelta(days=1))

    assert is_admissible(member, now=fixed_now)
    assert not is_expired_by_date(member, now=fixed_now)


def test_past_expiry_refuses_even_if_flag_says_active(make_member, fixed_now):
    member = make_member("M1", expiry=fixed_now - timedelta(seconds=1))

    assert not is_admissible(member, now=fixed_now)
    assert is_expired_by_date(member, now=fixed_now)


def test_non_active_status_refuses_even_with_future_expiry(make_member, fixed_now):
    for status in (MemberStatus.EXPIRED, MemberStatus.FROZEN, MemberStatus.CANCELLED):
        member = make_member("M1", status=status, expiry=fixed_now + timedelta(days=10))
        assert not is_admissible(member, now=fixed_now)


def test_iso_string_expiry_is_parsed(make_member, fixed_now):
    member = make_member("M1", expiry="2026-02-02")

    assert is_admissible(member, now=fixed_now)
    assert not is_admissible(member, now=datetime(2026, 2, 3))


def test_utc_suffix_is_accepted(make_member):
    tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).strftime("%Y-%m-%dT%H:%M:%SZ")
    member = make_member("M1", expiry=tomorrow)

    assert is_admissible(member)


def test_unparsable_expiry_fails_open_by_default(make_member, fixed_now, caplog):
    member = make_member("M1", expiry="not-a-date")

    with caplog.at_level(logging.WARNING):
        assert is_admissible(member, now=fixed_now)

    assert "unparsable expiry" in caplog.text
    assert not is_expired_by_date(member, now=fixed_now)


def test_unparsable_expiry_refused_when_fail_closed(make_member, fixed_now):
    member = make_member("M1", expiry="31/12/2099")

    assert not is_admissible(member, now=fixed_now, fail_open=False)


def test_missing_expiry_follows_the_same_rule(make_member, fixed_now):
    member = make_member("M1", expiry=None)

    assert is_admissible(member, now=fixed_now)
    assert not is_admissible(member, now=fixed_now, fail_open=False)
