"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any
import pytest
from httpx import ASGITransport, AsyncClient

from app.db import get_session
from app.main import app

USER_ID = "user-1"


# ---------------------------------------------------------------------------
# Fake DB session (no real Postgres needed)
# ---------------------------------------------------------------------------

class FakeSession:
    """Minimal stand-in for AsyncSession; records every statement it is given."""

    def __init__(self, rows: list[dict[str, Any]] | None = None):
        self._rows = rows or []
        self.statements: list[tuple[str, dict[str, Any]]] = []
        self.commits = 0

    async def execute(self, stmt, params=None):
        self.statements.append((str(stmt), dict(params or {})))
        return FakeResult(self._rows)

    async def commit(self):
        self.commits += 1

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []

    def keys(self):
        return self._keys

    def fetchall(self):
        return [tuple(r[k] for k in self._keys) for r in self._rows]

    def fetchone(self):
        rows = self.fetchall()
        return rows[0] if rows else None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_session():
    """Return a FakeSession with no rows (override _rows in tests if needed)."""
    return FakeSession()


@pytest.fixture()
def override_session(fake_session):
    """Override the FastAPI dependency so no real DB is needed."""
    async def _override():
        yield fake_session

    app.dependency_overrides[get_session] = _override
    yield fake_session
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_session):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"X-User-Id": USER_ID}) as ac:
        yield ac


def make_record(
    description: str | None = "",
    emoji: str = "🏃",
    due_date: date | None = date(2026, 2, 15),
    row_id: str = "rec-1",
    title: str = "Morning run",
    completed: bool = True,
    starred: bool = False,
    priority: str = "medium",
) -> dict[str, Any]:
    """Helper to build a fake records-table row dict."""
    ts = datetime(2026, 2, 15, 12, 0, tzinfo=timezone.utc)
    return {
        "id": row_id,
        "user_id": USER_ID,
        "title": title,
        "description": description,
        "completed": completed,
        "priority": priority,
        "due_date": due_date,
        "starred": starred,
        "emoji": emoji,
        "created_at": ts,
        "updated_at": ts,
    }
