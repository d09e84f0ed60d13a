"""
Shared pytest fixtures and configuration for the quiz client tests.

This file is automatically discovered by pytest and provides fixtures
available to all tests, including an in-memory stand-in for the Supabase
client's query builder.
"""

import itertools
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Make the project root importable for all tests
sys.path.insert(0, str(Path(__file__).parent.parent))


class FakeQuery:
    """Chainable query mimicking the parts of the Supabase builder the gateway uses."""

    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self._limit = None
        self._order = None

    def select(self, columns="*"):
        self.op, self.columns = "select", columns
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def contains(self, column, values):
        self.filters.append(("contains", column, list(values)))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def _matches(self, row):
        for kind, column, value in self.filters:
            if kind == "eq" and row.get(column) != value:
                return False
            if kind == "contains" and not set(value) <= set(row.get(column) or []):
                return False
        return True

    def execute(self):
        self.backend.queries.append(self)
        if self.table in self.backend.failing:
            raise RuntimeError(f"{self.table} unavailable")

        rows = self.backend.tables.setdefault(self.table, [])
        if self.op == "insert":
            row = {"id": f"{self.table}-{next(self.backend.ids)}", **self.payload}
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])
        if self.op == "update":
            matched = [r for r in rows if self._matches(r)]
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in matched])
        if self.op == "delete":
            matched = [r for r in rows if self._matches(r)]
            self.backend.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=matched)

        result = [dict(r) for r in rows if self._matches(r)]
        if self._order:
            column, desc = self._order
            result.sort(key=lambda r: r.get(column) or "", reverse=desc)
        if self._limit is not None:
            result = result[: self._limit]
        return SimpleNamespace(data=result)


class FakeAuth:
    """`accounts` maps email -> (password, user_id); `sessions` maps access token -> user_id."""

    def __init__(self):
        self.user_id = None
        self.accounts = {}
        self.sessions = {}

    def sign_in_with_password(self, credentials):
        password, user_id = self.accounts.get(credentials["email"], (None, None))
        if user_id is None or password != credentials["password"]:
            raise RuntimeError("Invalid login credentials")
        self.user_id = user_id

    def set_session(self, access_token, refresh_token):
        if access_token not in self.sessions:
            raise RuntimeError("Invalid JWT")
        self.user_id = self.sessions[access_token]

    def get_user(self):
        if self.user_id is None:
            return None
        return SimpleNamespace(user=SimpleNamespace(id=self.user_id))


class FakeSupabase:
    """In-memory backend: `tables` holds rows, `failing` lists tables whose queries raise."""

    def __init__(self):
        self.tables = {}
        self.failing = set()
        self.queries = []
        self.ids = itertools.count(1)
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def ops(self, table):
        """Operations executed against a table, in order."""
        return [q.op for q in self.queries if q.table == table]


def make_item_record(item_id, **overrides):
    record = {
        "id": item_id,
        "type": "short_answer",
        "prompt": f"Prompt for {item_id}?",
        "options": None,
        "answer": "paris",
        "explanation": "Paris is the capital of France.",
        "hints": ["It is on the Seine."],
        "tags": ["geography"],
        "difficulty": 2,
        "bloom_level": None,
        "created_at": "2026-10-01T00:00:00Z",
    }
    record.update(overrides)
    return record


@pytest.fixture
def item_record():
    """Factory for `items` rows: item_record(id, **overrides)."""
    return make_item_record


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def gateway(fake_supabase):
    from src.utils.persistence import BackendGateway

    return BackendGateway(client=fake_supabase)


@pytest.fixture
def signed_in(fake_supabase):
    """Sign in a learner with a stored profile."""
    fake_supabase.auth.user_id = "user-1"
    fake_supabase.tables["learner_profiles"] = [
        {
            "id": "lp-1",
            "user_id": "user-1",
            "mastery_by_tag": {"algebra": 0.5},
            "total_attempts": 4,
            "correct_attempts": 3,
            "current_streak": 2,
            "longest_streak": 3,
        }
    ]
    return "user-1"


@pytest.fixture
def item_records():
    return [
        make_item_record("item-1", tags=["algebra"], answer="4", prompt="What is 2 + 2?"),
        make_item_record("item-2"),
        make_item_record(
            "item-3",
            type="mcq",
            options=["Red", "Green", "Blue"],
            answer="Blue",
            tags=["colors", "algebra"],
            hints=[],
        ),
    ]


@pytest.fixture
def quiz_items(item_records):
    from src.models.quiz_item import QuizItem

    return [QuizItem.from_record(r) for r in item_records]


@pytest.fixture
def valid_item_payload():
    """An instructor-authored multiple-choice item that passes validation."""
    return {
        "type": "mcq",
        "prompt": "Which planet is known as the red planet?",
        "options": ["Venus", "Mars", "Jupiter", "Saturn"],
        "answer": "Mars",
        "explanation": "Iron oxide gives Mars its colour.",
        "hints": ["Named after a god of war."],
        "tags": ["astronomy"],
        "difficulty": 2,
        "bloom_level": "remember",
    }


# Pytest hooks for better test output


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
