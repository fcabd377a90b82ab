"""Record store — async access to the shared records table.

Workouts, goals and daily check-ins all live in one table (settings.records_table,
"todos" by default) and are told apart by the emoji marker:

  id (UUID), user_id, title, description, completed, priority, due_date,
  starred, emoji, created_at, updated_at

Every statement is scoped to one owner. Lookups return None / False when no
row matches; database errors propagate to the caller.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Sequence

from loguru import logger
from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings

RECORD_COLUMNS = (
    "id",
    "user_id",
    "title",
    "description",
    "completed",
    "priority",
    "due_date",
    "starred",
    "emoji",
    "created_at",
    "updated_at",
)
WRITABLE_COLUMNS = frozenset({"title", "description", "completed", "priority", "due_date", "starred", "emoji"})
ORDERABLE_COLUMNS = frozenset({"due_date", "created_at", "updated_at", "title", "priority"})
DEFAULT_ORDER = "due_date"

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?")


def _table() -> str:
    name = settings.records_table
    if not _IDENTIFIER_RE.fullmatch(name):
        raise ValueError(f"Invalid records table name: {name!r}")
    return name


def _returning() -> str:
    return ", ".join(RECORD_COLUMNS)


def _writable(record: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in record.items() if k in WRITABLE_COLUMNS}


def _first(result: Any) -> dict[str, Any] | None:
    row = result.fetchone()
    if row is None:
        return None
    return dict(zip(result.keys(), row))


async def get(session: AsyncSession, user_id: str, record_id: str) -> dict[str, Any] | None:
    sql = f"SELECT {_returning()} FROM {_table()} WHERE id = :id AND user_id = :user_id"
    result = await session.execute(text(sql), {"id": record_id, "user_id": user_id})
    return _first(result)


async def query(
    session: AsyncSession,
    user_id: str,
    markers: Sequence[str] | None = None,
    due_date: date | None = None,
    order_by: str = DEFAULT_ORDER,
    descending: bool = True,
) -> list[dict[str, Any]]:
    """Fetch an owner's records, optionally filtered by marker and due date.

    Unknown order_by columns fall back to due_date. Returns an empty list when
    nothing is found.
    """
    if markers is not None and not markers:
        return []

    sql = f"SELECT {_returning()} FROM {_table()} WHERE user_id = :user_id"
    params: dict[str, Any] = {"user_id": user_id}
    if markers is not None:
        sql += " AND emoji IN :markers"
        params["markers"] = list(markers)
    if due_date is not None:
        sql += " AND due_date = :due_date"
        params["due_date"] = due_date

    column = order_by if order_by in ORDERABLE_COLUMNS else DEFAULT_ORDER
    direction = "DESC" if descending else "ASC"
    sql += f" ORDER BY {column} {direction} NULLS LAST, created_at DESC"

    stmt = text(sql)
    if markers is not None:
        stmt = stmt.bindparams(bindparam("markers", expanding=True))

    logger.debug(f"Querying {_table()} for user={user_id} markers={markers} due_date={due_date}")
    result = await session.execute(stmt, params)
    columns = result.keys()
    return [dict(zip(columns, r)) for r in result.fetchall()]


async def create(session: AsyncSession, user_id: str, record: dict[str, Any]) -> dict[str, Any]:
    values = _writable(record)
    values["user_id"] = user_id
    columns = sorted(values)

    sql = (
        f"INSERT INTO {_table()} ({', '.join(columns)}) "
        f"VALUES ({', '.join(':' + c for c in columns)}) "
        f"RETURNING {_returning()}"
    )
    result = await session.execute(text(sql), values)
    created = _first(result)
    await session.commit()

    if created is None:
        raise RuntimeError("INSERT returned no row")
    logger.info(f"Created record {created.get('id')} for user={user_id} marker={values.get('emoji')}")
    return created


async def update(
    session: AsyncSession,
    user_id: str,
    record_id: str,
    changes: dict[str, Any],
) -> dict[str, Any] | None:
    """Apply a partial update. Columns outside WRITABLE_COLUMNS are ignored."""
    values = _writable(changes)
    if not values:
        return await get(session, user_id, record_id)

    assignments = ", ".join(f"{c} = :{c}" for c in sorted(values))
    sql = (
        f"UPDATE {_table()} SET {assignments}, updated_at = now() "
        "WHERE id = :id AND user_id = :user_id "
        f"RETURNING {_returning()}"
    )
    params = {**values, "id": record_id, "user_id": user_id}
    result = await session.execute(text(sql), params)
    updated = _first(result)
    await session.commit()

    if updated is not None:
        logger.info(f"Updated record {record_id} for user={user_id}: {sorted(values)}")
    return updated


async def delete(session: AsyncSession, user_id: str, record_id: str) -> bool:
    sql = f"DELETE FROM {_table()} WHERE id = :id AND user_id = :user_id RETURNING id"
    result = await session.execute(text(sql), {"id": record_id, "user_id": user_id})
    deleted = result.fetchone() is not None
    await session.commit()

    if deleted:
        logger.info(f"Deleted record {record_id} for user={user_id}")
    return deleted
