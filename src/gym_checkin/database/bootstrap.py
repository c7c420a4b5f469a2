from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List

import mysql.connector

from ..members.mysql_member_repository import MySQLMemberRepository
from ..users.mysql_user_repository import MySQLUserRepository
from .connection import DBConfig
from .seed import build_seed_data

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # schema.sql holds DDL only: no ';' inside literals.
    for chunk in sql.split(";"):
        stmt = chunk.strip()
        if stmt:
            yield stmt


def _server_connection(config: DBConfig):
    return mysql.connector.connect(
        host=config.host,
        port=int(config.port),
        user=config.user,
        password=config.password,
        connection_timeout=int(config.connect_timeout),
    )


def apply_schema(config: DBConfig, *, schema_path: Path) -> None:
    """Create the database (if missing) and every table in schema.sql."""

    sql = _strip_create_db_and_use(schema_path.read_text(encoding="utf-8"))
    conn = _server_connection(config)
    try:
        cur = conn.cursor()
        try:
            cur.execute(f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_bin")
            cur.execute(f"USE `{config.database}`")
            for stmt in _iter_sql_statements(sql):
                cur.execute(stmt)
            conn.commit()
        finally:
            cur.close()
    finally:
        conn.close()
    logger.info("Schema applied to %s", config.database)


def list_tables(config: DBConfig) -> List[str]:
    conn = _server_connection(config)
    try:
        cur = conn.cursor()
        try:
            cur.execute(f"SHOW TABLES FROM `{config.database}`")
            return [str(row[0]) for row in cur.fetchall()]
        finally:
            cur.close()
    finally:
        conn.close()


def seed_demo_data(members: MySQLMemberRepository, users: MySQLUserRepository) -> int:
    """Insert demo users and members that are not there yet. Returns rows added."""

    seed = build_seed_data()
    added = 0
    for user in seed.users:
        if users.get_by_id(user.user_id) is None:
            users.insert(user)
            added += 1
    for member in seed.members:
        if members.get_by_id(member.member_id) is None:
            members.insert(member)
            added += 1
    logger.info("Demo seed ready (%d rows added)", added)
    return added
