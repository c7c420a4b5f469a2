from __future__ import annotations

from gym_checkin.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from gym_checkin.attendance.resilient_attendance_repository import ResilientAttendanceRepository
from gym_checkin.container import build_container, db_config_from_dict
from gym_checkin.database.store import RecordStore
from gym_checkin.members.resilient_member_repository import ResilientMemberRepository

DB = {"host": "db.invalid", "port": "3307", "user": "gym", "password": "pw", "database": "gym_checkin"}


def test_volatile_only_without_durable_flag():
    store = RecordStore()
    container = build_container(db_config=DB, durable=False, store=store)

    assert container.conn is None
    assert container.store is store
    assert isinstance(container.attendance_repo, InMemoryAttendanceRepository)


def test_durable_wiring_is_lazy_and_falls_back_to_the_same_store():
    store = RecordStore()
    container = build_container(db_config=DB, durable=True, store=store)

    assert isinstance(container.attendance_repo, ResilientAttendanceRepository)
    assert isinstance(container.members_repo, ResilientMemberRepository)
    assert container.conn is not None
    assert not container.conn.is_established
    assert container.attendance_repo.volatile._store is store


def test_db_config_from_dict_coerces_types():
    cfg = db_config_from_dict(DB)

    assert cfg.port == 3307
    assert cfg.pool_size == 5
    assert cfg.connect_timeout == 3
