from __future__ import annotations

import pytest

from famtree.config import Settings
from famtree.models import FamilyEdge, FamilyMember
from famtree.store import InMemoryDocumentStore, USERS


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def settings():
    return Settings(
        db_path=":memory:",
        max_history=10,
        code_ttl_days=365,
        code_max_attempts=10,
        cascade_delete=True,
    )


@pytest.fixture
def add_user(store):
    """Write a user profile document and return its id."""

    def _add(user_id: str, email: str | None = None, **fields):
        store.set(USERS, user_id, {"email": email, **fields})
        return user_id

    return _add


def member(member_id: str, first: str = "", last: str = "", **fields) -> FamilyMember:
    return FamilyMember(id=member_id, first_name=first, last_name=last, **fields)


def edge(edge_id: str, from_id: str, to_id: str, kind: str = "parent") -> FamilyEdge:
    return FamilyEdge(id=edge_id, from_id=from_id, to_id=to_id, type=kind)
