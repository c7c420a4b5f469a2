from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container, db_config_from_dict
from .database.bootstrap import apply_schema, list_tables, seed_demo_data
from .database.store import RecordStore
from .logging_setup import configure_logging
from .members.mysql_member_repository import MySQLMemberRepository
from .users.mysql_user_repository import MySQLUserRepository

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def _prepare_database(settings, container: Container) -> None:
    """Optional schema/seed at start-up. A dead MySQL must not stop the app."""

    db_config = db_config_from_dict(getattr(settings, "DB_CONFIG"))
    try:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)) and container.conn is not None:
            seed_demo_data(MySQLMemberRepository(container.conn), MySQLUserRepository(container.conn))
    except Exception as exc:
        logger.warning("Database bootstrap skipped: %s", exc)


def _snapshot_on_exit(store: RecordStore) -> None:
    try:
        path = store.snapshot()
        logger.info("Record store snapshot written to %s", path)
    except Exception:
        logger.exception("Record store snapshot failed")


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    if not getattr(settings, "TESTING", False):
        configure_logging("gym-checkin")
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        durable = bool(getattr(settings, "DURABLE_STORE_ENABLED", False))
        store = RecordStore(
            snapshot_path=getattr(settings, "SNAPSHOT_PATH", "") or None,
            seed=bool(getattr(settings, "SEED_VOLATILE_STORE", False)),
        )
        container = build_container(
            db_config=getattr(settings, "DB_CONFIG", None),
            durable=durable,
            store=store,
            fail_open=bool(getattr(settings, "EXPIRY_FAIL_OPEN", True)),
        )
        if durable:
            _prepare_database(settings, container)
        if store.snapshot_path is not None:
            atexit.register(_snapshot_on_exit, store)

    logger.info("settings=%s durable=%s", settings_module, container.conn is not None)
    app.extensions["gym_checkin"] = container

    register_attendance(app, container)

    return app
