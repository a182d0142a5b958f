"""Pytest fixtures for backend tests."""

from __future__ import annotations

import os
import re
import threading
import uuid
from collections.abc import Callable, Iterator
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient


def _set_default_env() -> None:
    os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
    os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
    os.environ.setdefault("SUPABASE_SERVICE_KEY", "service-key")
    os.environ.setdefault("ENABLE_SCHEDULER", "false")


_set_default_env()

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def _comparable(value: Any) -> Any:
    from app.utils.time import parse_timestamp

    if isinstance(value, str) and _ISO_DATE.match(value):
        return parse_timestamp(value)
    return value


def _matches_eq(actual: Any, expected: Any) -> bool:
    if isinstance(actual, bool) or isinstance(expected, bool):
        return actual is expected
    return str(actual) == str(expected)


class FakeQuery:
    """Chainable stand-in for a PostgREST request builder."""

    def __init__(self, store: FakeStore, table: str) -> None:
        self.store = store
        self.table = table
        self.operation = "select"
        self.payload: Any = None
        self.predicates: list[Callable[[dict[str, Any]], bool]] = []
        self.order_key: str | None = None
        self.order_desc = False
        self.row_limit: int | None = None

    def select(self, *_args: Any, **_kwargs: Any) -> FakeQuery:
        self.operation = "select"
        return self

    def insert(self, payload: Any) -> FakeQuery:
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> FakeQuery:
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self) -> FakeQuery:
        self.operation = "delete"
        return self

    def eq(self, column: str, value: Any) -> FakeQuery:
        self.predicates.append(lambda row: _matches_eq(row.get(column), value))
        return self

    def _compare(self, column: str, value: Any, op: Callable[[Any, Any], bool]) -> FakeQuery:
        def predicate(row: dict[str, Any]) -> bool:
            current = row.get(column)
            return current is not None and op(_comparable(current), _comparable(value))

        self.predicates.append(predicate)
        return self

    def gte(self, column: str, value: Any) -> FakeQuery:
        return self._compare(column, value, lambda a, b: a >= b)

    def gt(self, column: str, value: Any) -> FakeQuery:
        return self._compare(column, value, lambda a, b: a > b)

    def lte(self, column: str, value: Any) -> FakeQuery:
        return self._compare(column, value, lambda a, b: a <= b)

    def lt(self, column: str, value: Any) -> FakeQuery:
        return self._compare(column, value, lambda a, b: a < b)

    def order(self, column: str, desc: bool = False) -> FakeQuery:
        self.order_key = column
        self.order_desc = desc
        return self

    def limit(self, count: int) -> FakeQuery:
        self.row_limit = count
        return self

    def _selected(self) -> list[dict[str, Any]]:
        rows = [row for row in self.store.rows(self.table) if all(p(row) for p in self.predicates)]
        if self.order_key:
            key = self.order_key
            present = [row for row in rows if row.get(key) is not None]
            missing = [row for row in rows if row.get(key) is None]
            present.sort(key=lambda row: _comparable(row[key]), reverse=self.order_desc)
            rows = present + missing
        if self.row_limit is not None:
            rows = rows[: self.row_limit]
        return rows

    def execute(self) -> SimpleNamespace:
        with self.store.lock:
            if self.operation == "insert":
                payloads = self.payload if isinstance(self.payload, list) else [self.payload]
                data = [self.store.insert(self.table, payload) for payload in payloads]
            elif self.operation == "update":
                data = []
                for row in self._selected():
                    row.update(self.payload)
                    data.append(dict(row))
            elif self.operation == "delete":
                data = [dict(row) for row in self._selected()]
                removed = {row["id"] for row in data}
                self.store.tables[self.table] = [
                    row for row in self.store.rows(self.table) if row["id"] not in removed
                ]
            else:
                data = [dict(row) for row in self._selected()]
        return SimpleNamespace(data=data)


class FakeAuthAdmin:
    """Records auth admin calls and mints user ids."""

    def __init__(self) -> None:
        self.created: list[dict[str, Any]] = []
        self.updated: list[tuple[str, dict[str, Any]]] = []
        self.deleted: list[str] = []

    def create_user(self, attributes: dict[str, Any]) -> SimpleNamespace:
        self.created.append(attributes)
        user = SimpleNamespace(id=str(uuid.uuid4()), email=attributes["email"])
        return SimpleNamespace(user=user)

    def update_user_by_id(self, user_id: str, attributes: dict[str, Any]) -> SimpleNamespace:
        self.updated.append((user_id, attributes))
        return SimpleNamespace(user=SimpleNamespace(id=user_id))

    def delete_user(self, user_id: str) -> None:
        self.deleted.append(user_id)


class FakeStore:
    """In-memory tables shared by one fake client."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.lock = threading.RLock()

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def insert(self, table: str, payload: dict[str, Any]) -> dict[str, Any]:
        row = dict(payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", f"2026-01-01T00:00:{len(self.rows(table)):02d}+00:00")
        self.rows(table).append(row)
        return dict(row)


class FakeSupabaseClient:
    """Minimal Supabase client double backed by ``FakeStore``."""

    def __init__(self) -> None:
        self.store = FakeStore()
        self.auth = SimpleNamespace(admin=FakeAuthAdmin())

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.store, name)

    def seed(self, table: str, **row: Any) -> dict[str, Any]:
        """Insert a row directly and return it."""
        return self.store.insert(table, row)


@pytest.fixture(autouse=True)
def _clear_caches() -> Iterator[None]:
    from app.services.common import clear_member_cache

    clear_member_cache()
    yield
    clear_member_cache()


@pytest.fixture
def fake_client() -> FakeSupabaseClient:
    """Empty in-memory Supabase client."""
    return FakeSupabaseClient()


@pytest.fixture
def family(fake_client: FakeSupabaseClient) -> SimpleNamespace:
    """Family F with admin A and a child B holding no capabilities."""
    from app.services.permissions import Actor, full_capabilities

    family_row = fake_client.seed("families", name="F", created_by="member-a")
    family_id = family_row["id"]
    admin_row = fake_client.seed(
        "members",
        id="member-a",
        name="A",
        email="a@example.com",
        role="admin",
        family_id=family_id,
        capabilities=full_capabilities(),
    )
    child_row = fake_client.seed(
        "members",
        id="member-b",
        name="B",
        email="b@example.com",
        role="child",
        family_id=family_id,
        capabilities={},
    )
    return SimpleNamespace(
        id=family_id,
        admin=Actor.from_member(admin_row),
        child=Actor.from_member(child_row),
    )


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a FastAPI test client."""
    from app.main import app

    return TestClient(app)


@pytest.fixture
def api(client: TestClient, fake_client: FakeSupabaseClient):
    """Test client whose storage is the fake and whose actor is set per test."""
    from app.dependencies import get_current_actor, get_db_client
    from app.main import app

    state: dict[str, Any] = {}

    def act_as(actor: Any) -> TestClient:
        state["actor"] = actor
        return client

    app.dependency_overrides[get_db_client] = lambda: fake_client
    app.dependency_overrides[get_current_actor] = lambda: state["actor"]
    yield act_as
    app.dependency_overrides.clear()
