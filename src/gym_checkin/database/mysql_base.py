from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..common.pagination import PaginatedResult, Pagination
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def where_sql(clauses: Sequence[str]) -> str:
    return " WHERE " + " AND ".join(clauses) if clauses else ""


def like_any_case(value: str) -> str:
    """LIKE pattern for a substring match; wildcards in ``value`` are escaped."""
    escaped = value.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def select_page(
    cur,
    *,
    table: str,
    columns: str,
    clauses: Sequence[str],
    params: Sequence[Any],
    order_by: str,
    pagination: Optional[Pagination],
    row_mapper,
) -> PaginatedResult:
    """Run the COUNT + SELECT pair every repository's ``find_all`` needs."""

    where = where_sql(clauses)
    base_params: Tuple[Any, ...] = tuple(params)

    if pagination is None:
        cur.execute(f"SELECT {columns} FROM {table}{where} ORDER BY {order_by}", base_params)
        return PaginatedResult.unpaged([row_mapper(r) for r in fetchall(cur)])

    cur.execute(f"SELECT COUNT(*) AS total FROM {table}{where}", base_params)
    total = int((fetchone(cur) or {}).get("total") or 0)

    cur.execute(
        f"SELECT {columns} FROM {table}{where} ORDER BY {order_by} LIMIT %s OFFSET %s",
        base_params + (pagination.page_size, pagination.offset),
    )
    rows = [row_mapper(r) for r in fetchall(cur)]
    return PaginatedResult.from_page(rows, total=total, pagination=pagination)
