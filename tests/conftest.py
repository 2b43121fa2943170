"""
Pytest configuration and fixtures for Northstar tests.
"""

import os
from typing import Any
from unittest.mock import MagicMock

import pytest

# Set test environment before importing northstar modules
os.environ["NORTHSTAR_ENV"] = "development"
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key-not-real")

from fastapi.testclient import TestClient

from northstar.access.session import CookieUpdate, Session
from northstar.web.app import create_app

ACCESS_COOKIE = "sb-access-token"


# ---------------------------------------------------------------------------
# Fake Supabase client: in-memory tables with eq() filtering and upserts
# ---------------------------------------------------------------------------


class FakeQuery:
    """Chainable stand-in for a postgrest query builder."""

    def __init__(self, rows: list[dict], error: Exception | None = None):
        self._rows = rows
        self._error = error
        self._filters: dict[str, Any] = {}
        self._single = False
        self._limit: int | None = None
        self._write: tuple[str, dict, str | None] | None = None

    def select(self, *args, **kwargs):
        return self

    def upsert(self, values: dict, on_conflict: str | None = None, **kwargs):
        self._write = ("upsert", values, on_conflict)
        return self

    def update(self, values: dict, **kwargs):
        self._write = ("update", values, None)
        return self

    def eq(self, column: str, value: Any):
        self._filters[column] = value
        return self

    def order(self, *args, **kwargs):
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    def maybe_single(self):
        self._single = True
        return self

    def _matches(self, row: dict, columns) -> bool:
        return all(row.get(c) == v for c, v in columns)

    def _apply_write(self):
        op, values, on_conflict = self._write
        if op == "update":
            changed = [r for r in self._rows if self._matches(r, self._filters.items())]
            for row in changed:
                row.update(values)
            return MagicMock(data=changed)

        keys = [k.strip() for k in (on_conflict or "").split(",") if k.strip()]
        existing = next(
            (r for r in self._rows if keys and self._matches(r, ((k, values.get(k)) for k in keys))),
            None,
        )
        if existing is None:
            existing = dict(values)
            self._rows.append(existing)
        else:
            existing.update(values)
        return MagicMock(data=[existing])

    def execute(self):
        if self._error is not None:
            raise self._error
        if self._write is not None:
            return self._apply_write()
        rows = [r for r in self._rows if self._matches(r, self._filters.items())]
        if self._limit is not None:
            rows = rows[: self._limit]
        if self._single:
            # postgrest returns None rather than an empty response here
            return MagicMock(data=rows[0]) if rows else None
        return MagicMock(data=rows)


class FakeSupabase:
    """Minimal Supabase client: table() reads/writes plus a mocked storage API."""

    def __init__(self, tables: dict[str, list[dict]] | None = None, errors: dict[str, Exception] | None = None):
        self.tables = tables or {}
        self.errors = errors or {}
        self.storage = MagicMock()
        self.tables_queried: list[str] = []

    def table(self, name: str) -> FakeQuery:
        self.tables_queried.append(name)
        return FakeQuery(self.tables.setdefault(name, []), self.errors.get(name))


class FakeIdentityProvider:
    """Maps access-token cookie values to user ids."""

    def __init__(
        self,
        users: dict[str, str] | None = None,
        error: Exception | None = None,
        cookies_to_set: list[CookieUpdate] | None = None,
    ):
        self.users = users or {}
        self.error = error
        self.cookies_to_set = cookies_to_set or []
        self.calls = 0

    def get_session(self, cookies) -> Session:
        self.calls += 1
        if self.error is not None:
            raise self.error
        token = cookies.get(ACCESS_COOKIE)
        user_id = self.users.get(token)
        if not user_id:
            return Session()
        return Session(
            user_id=user_id,
            email=f"{user_id}@example.com",
            access_token=token,
            cookies_to_set=list(self.cookies_to_set),
        )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_supabase():
    """Mock Supabase client for unit tests (chained table operations)."""
    mock_client = MagicMock()

    mock_table = MagicMock()
    mock_table.select.return_value = mock_table
    mock_table.eq.return_value = mock_table
    mock_table.order.return_value = mock_table
    mock_table.maybe_single.return_value = mock_table
    mock_table.execute.return_value = MagicMock(data=[])

    mock_client.table.return_value = mock_table

    return mock_client


@pytest.fixture
def fake_db():
    """Empty in-memory database; tests add rows to fake_db.tables."""
    return FakeSupabase()


@pytest.fixture
def identity():
    """Identity provider knowing one signed-in user."""
    return FakeIdentityProvider(users={"token-1": "user-1"})


@pytest.fixture
def make_client(fake_db, identity):
    """Build a TestClient, optionally signed in with an access token."""

    def _make(token: str | None = None, db: FakeSupabase | None = None, provider=None) -> TestClient:
        app = create_app(
            identity_provider=provider or identity,
            client_factory=lambda access_token: db or fake_db,
        )
        client = TestClient(app, follow_redirects=False)
        if token:
            client.cookies.set(ACCESS_COOKIE, token)
        return client

    return _make


@pytest.fixture
def onboarded_settings():
    """user_settings row for a user who finished the wizard."""
    return {
        "user_id": "user-1",
        "onboarding_completed": True,
        "default_landing": "today",
        "timezone": "UTC",
    }
