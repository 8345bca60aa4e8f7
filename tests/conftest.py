# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - A recording fake of the Supabase client (tables, RPCs, storage, auth)
# - TestClient fixtures with auth dependencies overridden
# =============================================================================

import os
from typing import Any, Callable
from unittest.mock import MagicMock, patch
from uuid import UUID

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length-1234")
os.environ.setdefault("GOOGLE_SHEET_ID", "")
os.environ.setdefault("GOOGLE_API_KEY", "")
os.environ.setdefault("CONTENT_CATALOG_PATH", "")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from lib.supabase_client import SupabaseClient

USER_ID = UUID("11111111-1111-1111-1111-111111111111")
OTHER_USER_ID = UUID("22222222-2222-2222-2222-222222222222")
ITEM_ID = "33333333-3333-3333-3333-333333333333"
CATEGORY_ID = "44444444-4444-4444-4444-444444444444"


# =============================================================================
# Fake Supabase
# =============================================================================

class FakeResponse:
    def __init__(self, data: Any = None, count: int | None = None):
        self.data = data
        self.count = count


class FakeQuery:
    """
    Records a PostgREST builder chain and answers execute() from FakeSupabase.

    Every builder method returns self, so any chain the services build works.
    """

    BUILDER_METHODS = (
        "eq", "neq", "gte", "lte", "ilike", "or_", "order", "limit", "range",
    )

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.operation = "select"
        self.payload: Any = None
        self.calls: list[tuple[str, tuple, dict]] = []

    def _record(self, name: str, *args, **kwargs) -> "FakeQuery":
        self.calls.append((name, args, kwargs))
        return self

    def __getattr__(self, name: str):
        if name in self.BUILDER_METHODS:
            return lambda *args, **kwargs: self._record(name, *args, **kwargs)
        raise AttributeError(name)

    def select(self, *args, **kwargs):
        self.operation = "select"
        return self._record("select", *args, **kwargs)

    def insert(self, payload, **kwargs):
        self.operation, self.payload = "insert", payload
        return self._record("insert", payload, **kwargs)

    def update(self, payload, **kwargs):
        self.operation, self.payload = "update", payload
        return self._record("update", payload, **kwargs)

    def upsert(self, payload, **kwargs):
        self.operation, self.payload = "upsert", payload
        return self._record("upsert", payload, **kwargs)

    def delete(self, **kwargs):
        self.operation = "delete"
        return self._record("delete", **kwargs)

    def args_of(self, method: str) -> list[tuple]:
        """Positional args of every call to a builder method."""
        return [args for name, args, _ in self.calls if name == method]

    def execute(self) -> FakeResponse:
        self.db.executed.append(self)
        seeded = self.table in self.db.rows and (self.table, self.operation) not in self.db.responses
        if seeded and self.operation == "select":
            return self.db._select_seeded(self)
        return self.db.next_response(self.table, self.operation)


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db = db
        self.name = name
        self.params = params

    def execute(self) -> FakeResponse:
        self.db.rpc_calls.append((self.name, self.params))
        error = self.db.rpc_errors.get(self.name)
        if error:
            raise error
        handler = self.db.rpc_handlers.get(self.name)
        if handler:
            return FakeResponse(handler(self.params))
        return FakeResponse(self.db.rpc_results.get(self.name))


class FakeSupabase:
    """
    In-memory stand-in for supabase.Client.

    Configure answers with respond(table, data, ...); several answers for the
    same table/operation are returned in order, the last one repeating.

    Alternatively seed(table, rows) keeps real rows: selects with no queued
    answer filter them by eq() and limit(), and rpc_handlers can change them.
    """

    def __init__(self):
        self.responses: dict[tuple[str, str], list[FakeResponse]] = {}
        self.executed: list[FakeQuery] = []
        self.rpc_calls: list[tuple[str, dict]] = []
        self.rpc_results: dict[str, Any] = {}
        self.rpc_errors: dict[str, Exception] = {}
        self.rpc_handlers: dict[str, Callable[[dict], Any]] = {}
        self.rows: dict[str, list[dict]] = {}
        self.storage = MagicMock()
        self.storage.from_.return_value.get_public_url.side_effect = (
            lambda path: f"https://cdn.test/{path}"
        )
        self.auth = MagicMock()

    def respond(self, table: str, *datas: Any, operation: str = "select", count: int | None = None):
        self.responses[(table, operation)] = [FakeResponse(d, count) for d in datas]

    def seed(self, table: str, rows: list[dict]):
        self.rows[table] = rows

    def _select_seeded(self, query: FakeQuery) -> FakeResponse:
        rows = [
            row for row in self.rows[query.table]
            if all(str(row.get(column)) == str(value) for column, value in query.args_of("eq"))
        ]
        for (limit,) in query.args_of("limit"):
            rows = rows[:limit]
        return FakeResponse(rows)

    def next_response(self, table: str, operation: str) -> FakeResponse:
        queue = self.responses.get((table, operation))
        if not queue:
            return FakeResponse([])
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRpc:
        return FakeRpc(self, name, params)

    def queries(self, table: str, operation: str | None = None) -> list[FakeQuery]:
        """Executed queries for a table, optionally of one operation."""
        return [
            q for q in self.executed
            if q.table == table and (operation is None or q.operation == operation)
        ]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_supabase():
    """Patch the singleton client with a FakeSupabase."""
    fake = FakeSupabase()
    with patch.object(SupabaseClient, "get_client", return_value=fake):
        yield fake


@pytest.fixture(autouse=True)
def clear_caches():
    """Module-level TTL caches must not leak between tests."""
    from app.routers.tasks import _synced_jobs
    from core.services.content_service import subjects_cache
    from core.services.contributors_service import contributors_cache
    from core.services.marketplace_service import marketplace_cache

    for cache in (subjects_cache, contributors_cache, marketplace_cache, _synced_jobs):
        cache.clear()
    yield


@pytest.fixture
def auth_user():
    from app.auth.models import AuthUser
    return AuthUser(id=USER_ID, email="asha@gmail.com")


@pytest.fixture
def client(auth_user):
    """TestClient authenticated as a regular user."""
    from fastapi.testclient import TestClient

    from app.auth.dependencies import get_current_user
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: auth_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(auth_user):
    """TestClient authenticated as an admin."""
    from fastapi.testclient import TestClient

    from app.auth.dependencies import get_current_user, require_admin
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: auth_user
    app.dependency_overrides[require_admin] = lambda: auth_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_item():
    """A marketplace_items row joined with seller and category."""
    return {
        "id": ITEM_ID,
        "seller_id": str(OTHER_USER_ID),
        "title": "Casio fx-991EX",
        "description": "Scientific calculator, barely used",
        "category_id": CATEGORY_ID,
        "price": 900,
        "condition": "like_new",
        "images": ["https://cdn.test/a.jpg"],
        "location": "Andheri",
        "is_available": True,
        "is_sold": False,
        "views_count": 3,
        "verification_status": "approved",
        "created_at": "2025-01-15T10:00:00+00:00",
        "seller": {
            "id": str(OTHER_USER_ID),
            "name": "Rohan",
            "phone": "98765 43210",
        },
        "category": {"id": CATEGORY_ID, "name": "Electronics", "icon": "cpu"},
    }


@pytest.fixture
def sample_subject():
    """A subject as stored in the static catalog."""
    return {
        "key": "am1",
        "name": "Applied Mathematics 1",
        "icon": "Brain",
        "color": "blue",
        "modules": {
            "2": {
                "number": 2,
                "notes_links": [],
                "topics": [
                    {
                        "title": "Partial Differentiation",
                        "videos": [{"title": "Lecture 1", "url": "https://youtu.be/c"}],
                    },
                ],
            },
            "1": {
                "number": 1,
                "notes_links": [{"title": "Module 1 Notes", "url": "https://drive.test/m1"}],
                "topics": [
                    {
                        "title": "Complex Numbers",
                        "description": "De Moivre's theorem",
                        "videos": [
                            {"title": "Lecture 1", "url": "https://youtu.be/a"},
                            {"title": "Lecture 2", "url": "https://youtu.be/b"},
                        ],
                    },
                    {"title": "Hyperbolic Functions", "videos": []},
                ],
            },
        },
    }
