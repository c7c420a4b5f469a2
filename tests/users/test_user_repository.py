from __future__ import annotations

import pytest

from gym_checkin.core.enums import Role
from gym_checkin.core.exceptions import ValidationError
from gym_checkin.users.model import DirectoryUser
from gym_checkin.users.repository import UserFilters


def test_users_are_ordered_by_name_code_point(repos, store):
    store.users.append(DirectoryUser("U6", "alice", "alice@gym.test", Role.MEMBER, "B3"))
    store.users.append(DirectoryUser("U7", "Bob", "bob@gym.test", Role.MEMBER, "B3"))

    names = [u.name for u in repos.users.find_all(UserFilters(branch_id="B3")).data]

    assert names == ["Bob", "alice"]


def test_filters_by_role_and_branch(repos):
    admins = repos.users.find_all(UserFilters(role=Role.BRANCH_ADMIN, branch_id="B1")).data

    assert [u.user_id for u in admins] == ["U1", "U2"]
    assert [u.user_id for u in repos.users.find_by_branch("B2")] == ["U3"]


def test_create_lowercases_email(repos):
    user = repos.users.create(name="Dana", email="Dana@Gym.Test", role="branch_admin", branch_id="B2")

    assert user.user_id.startswith("USR_")
    assert user.email == "dana@gym.test"
    assert user.role == Role.BRANCH_ADMIN


def test_update_ignores_identity_fields(repos):
    updated = repos.users.update("U5", user_id="U999", created_at=None, role="branch_admin")

    assert updated.user_id == "U5"
    assert updated.role == Role.BRANCH_ADMIN
    assert repos.users.get_by_id("U999") is None
    with pytest.raises(ValidationError):
        repos.users.update("U5", password="secret")
