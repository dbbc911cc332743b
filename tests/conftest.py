# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - An in-memory stand-in for the Supabase query builder so service tests
#   run real filters, ordering and counts without a database
# - Row factories for the main tables
# =============================================================================

import os
import re
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any
from uuid import UUID, uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("GOOGLE_PLACES_API_KEY", "test-places-key")
os.environ.setdefault("PLACES_PAGE_TOKEN_DELAY", "0")
os.environ.setdefault("SITE_URL", "https://nearindia.in")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from lib.supabase_client import SupabaseClient


# =============================================================================
# In-memory Supabase
# =============================================================================

_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _norm(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    return value


def _ilike(value: Any, pattern: str) -> bool:
    if value is None:
        return False
    regex = "^" + ".*".join(re.escape(part) for part in pattern.split("%")) + "$"
    return re.match(regex, str(value), re.IGNORECASE | re.DOTALL) is not None


class FakeQuery:
    """Chainable subset of the PostgREST builder used by the services."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload: Any = None
        self.count_mode: str | None = None
        self.filters: list = []
        self.order_by: list[tuple[str, bool]] = []
        self.window: tuple[int, int] | None = None
        self.max_rows: int | None = None

    # Actions -----------------------------------------------------------------

    def select(self, columns: str = "*", count: str | None = None):
        self.action = "select"
        self.count_mode = count
        return self

    def insert(self, data):
        self.action = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.action = "update"
        self.payload = data
        return self

    def delete(self):
        self.action = "delete"
        return self

    # Filters -----------------------------------------------------------------

    def eq(self, column, value):
        self.filters.append(lambda row: _norm(row.get(column)) == _norm(value))
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: _norm(row.get(column)) != _norm(value))
        return self

    def ilike(self, column, pattern):
        self.filters.append(lambda row: _ilike(row.get(column), pattern))
        return self

    def in_(self, column, values):
        wanted = {_norm(v) for v in values}
        self.filters.append(lambda row: _norm(row.get(column)) in wanted)
        return self

    def or_(self, expression: str):
        checks = []
        for part in expression.split(","):
            column, op, value = part.split(".", 2)
            if op == "eq":
                checks.append(lambda row, c=column, v=value: str(row.get(c)) == v)
            elif op == "ilike":
                checks.append(lambda row, c=column, v=value: _ilike(row.get(c), v))
            else:
                raise NotImplementedError(op)
        self.filters.append(lambda row: any(check(row) for check in checks))
        return self

    # Shaping -----------------------------------------------------------------

    def order(self, column, desc: bool = False):
        self.order_by.append((column, desc))
        return self

    def range(self, start: int, end: int):
        self.window = (start, end)
        return self

    def limit(self, n: int):
        self.max_rows = n
        return self

    # Execution ---------------------------------------------------------------

    def _matching(self) -> list[dict]:
        rows = self.db.tables.setdefault(self.table, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.calls.append((self.table, self.action))
        if self.table in self.db.failing:
            raise RuntimeError(f"{self.table} unavailable")

        rows = self.db.tables.setdefault(self.table, [])

        if self.action == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.add(self.table, **{k: _norm(v) for k, v in item.items()}) for item in items]
            return SimpleNamespace(data=[dict(r) for r in inserted], count=None)

        matching = self._matching()

        if self.action == "update":
            for row in matching:
                row.update({k: _norm(v) for k, v in self.payload.items()})
            return SimpleNamespace(data=[dict(r) for r in matching], count=None)

        if self.action == "delete":
            self.db.tables[self.table] = [r for r in rows if r not in matching]
            return SimpleNamespace(data=[dict(r) for r in matching], count=None)

        for column, desc in reversed(self.order_by):
            matching.sort(key=lambda r, c=column: (r.get(c) is None, r.get(c) if r.get(c) is not None else ""), reverse=desc)

        total = len(matching) if self.count_mode else None
        if self.window:
            matching = matching[self.window[0]:self.window[1] + 1]
        if self.max_rows is not None:
            matching = matching[:self.max_rows]

        return SimpleNamespace(data=[dict(r) for r in matching], count=total)


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        self.storage.files[(self.name, path)] = file
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.storage.files.pop((self.name, path), None)
        return []


class FakeStorage:
    def __init__(self):
        self.files: dict[tuple[str, str], bytes] = {}

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)

    def list_buckets(self):
        return []


class FakeSupabase:
    """Tables are plain lists of dicts keyed by table name."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.storage = FakeStorage()
        self.calls: list[tuple[str, str]] = []
        self.failing: set[str] = set()
        self._clock = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def add(self, table: str, **row) -> dict:
        """Insert a row directly, filling id and timestamps."""
        self._clock += 1
        stamp = (_BASE_TIME + timedelta(minutes=self._clock)).isoformat()
        row.setdefault("id", str(uuid4()))
        row.setdefault("created_at", stamp)
        row.setdefault("updated_at", stamp)
        self.tables.setdefault(table, []).append(row)
        return row

    def rows(self, table: str) -> list[dict]:
        return self.tables.get(table, [])


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db(monkeypatch):
    """Fresh in-memory database installed as the Supabase singleton."""
    fake = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", fake)
    return fake


@pytest.fixture
def owner_id():
    return str(uuid4())


@pytest.fixture
def admin_id(db):
    user_id = str(uuid4())
    db.add("profiles", id=user_id, email="admin@nearindia.in", full_name="Admin", is_blocked=False)
    db.add("user_roles", user_id=user_id, role="admin")
    return user_id


@pytest.fixture
def category(db):
    return db.add("categories", name="Restaurants", slug="restaurants", icon="utensils")


@pytest.fixture
def make_business(db, category, owner_id):
    """Factory for business rows; approved and owned by `owner_id` by default."""

    def _make(**overrides):
        row = {
            "name": "Sharma Sweets",
            "slug": None,
            "category_id": category["id"],
            "owner_id": owner_id,
            "address": "12 MG Road, Navrangpura",
            "city": "Ahmedabad",
            "state": "Gujarat",
            "phone": "+91 98250 00000",
            "email": "hello@sharmasweets.in",
            "status": "approved",
            "is_featured": False,
            "rejection_reason": None,
        }
        row.update(overrides)
        if row["slug"] is None:
            row["slug"] = row["name"].lower().replace(" ", "-")
        return db.add("businesses", **row)

    return _make


@pytest.fixture
def business_payload(category):
    """Minimal valid create payload."""
    return {
        "name": "Patel Hardware",
        "category_id": category["id"],
        "address": "45 Station Road, Maninagar",
        "city": "Ahmedabad",
        "state": "Gujarat",
        "phone": "+91 79 2546 0000",
        "email": "info@patelhardware.in",
    }
