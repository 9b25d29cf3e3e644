"""Shared fixtures for family tree server tests."""

import os
from pathlib import Path

import pytest

# Set env vars BEFORE importing any family_tree_server modules
# Explicit values so .env doesn't override them (load_dotenv won't override existing)
_TEST_DATA = Path(__file__).parent / "fixtures" / "sample_family.json"
os.environ["FAMILY_TREE_DATA_FILE"] = str(_TEST_DATA)
os.environ["FAMILY_TREE_USER_ID"] = ""  # Empty string = anonymous
os.environ["FAMILY_TREE_PERSIST"] = "false"
os.environ["TRACING_ENABLED"] = "false"

# Now import and initialize family_tree_server (safe because env vars are set)
from family_tree_server import initialize  # noqa: E402

initialize()

from family_tree_server import state  # noqa: E402
from family_tree_server.models import Person, Relationship  # noqa: E402
from family_tree_server.store import load_family_data  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_data(monkeypatch):
    """Reload the snapshot so every test starts from the same tables."""
    monkeypatch.setattr(state, "ACTING_USER_ID", None)
    monkeypatch.setattr(state, "PERSIST", False)
    load_family_data()
    yield


@pytest.fixture
def admin_id():
    return "u-admin"


@pytest.fixture
def member_id():
    """An active, non-admin member with a saved personal root (p3)."""
    return "u-member"


@pytest.fixture
def inactive_id():
    return "u-inactive"


@pytest.fixture
def make_person():
    """Factory for Person rows in pure-function tests."""

    def _make(id, gender="male", birth_year=None, **kwargs):
        return Person(
            id=id, full_name=f"Person {id}", gender=gender, birth_year=birth_year, **kwargs
        )

    return _make


@pytest.fixture
def child_of():
    """Factory for child-type edges: child_of(parent, child)."""
    counter = iter(range(1, 10_000))

    def _make(parent, child, type="biological_child", sort_order=None):
        return Relationship(
            id=f"rel{next(counter)}",
            type=type,
            person_a=parent,
            person_b=child,
            sort_order=sort_order,
        )

    return _make


@pytest.fixture
def married():
    counter = iter(range(1, 10_000))

    def _make(a, b):
        return Relationship(id=f"m{next(counter)}", type="marriage", person_a=a, person_b=b)

    return _make
