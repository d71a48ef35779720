"""
Pytest fixtures for the test suite.

Data-layer tests use a file-backed SQLite database created under `tmp_path`,
so every test starts from an empty schema. Sessions come from a pooled
engine: the request session and the role store's own sessions use separate
connections, and the role store only sees committed rows.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.acl.catalog import default_catalog
from app.acl.models import Role, Scope
from app.acl.roles_cache import RolesCache
from app.db.role_store import SqlRoleStore
from app.repos.factory import ReposFactory


@pytest.fixture
def engine(tmp_path):
    """Create a fresh SQLite database file for each test."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
        echo=False,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def tables(engine):
    """Create all ORM tables on the test engine."""
    from app.db.base import Base
    from app.models import addresses, security  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def session_factory(tables):
    return sessionmaker(
        bind=tables,
        autocommit=False,
        autoflush=False,
        class_=Session,
    )


@pytest.fixture
def db_session(session_factory):
    """
    Provide a Session bound to the per-test database.

    Use this in tests that need a database (e.g. data layer tests).
    """
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def roles_cache(session_factory):
    """Roles cache backed by the real SQL role store on the test database."""
    return RolesCache(SqlRoleStore(session_factory))


@pytest.fixture
def repos_factory(roles_cache):
    return ReposFactory(default_catalog(), roles_cache)


# ---- ACL fixtures (no database) -------------------------------------------------------


class StubRoleStore:
    """Call-counting role store with canned answers."""

    def __init__(self, roles: dict[int, list[Role]] | None = None, error: Exception | None = None) -> None:
        self.roles = dict(roles or {})
        self.error = error
        self.calls: list[int] = []
        self._lock = threading.Lock()

    def list_roles_for_user(self, user_id: int) -> list[Role]:
        with self._lock:
            self.calls.append(user_id)
        if self.error is not None:
            raise self.error
        return list(self.roles.get(user_id, []))

    def calls_for(self, user_id: int) -> int:
        return self.calls.count(user_id)


@dataclass
class OwnedRecord:
    """Minimal protected entity: owned by `owner_id` (None when unknown)."""

    owner_id: int | None

    def is_in_scope(self, scope: Scope, acting_user_id: int | None) -> bool:
        return scope.allows(acting_user_id, self.owner_id)


@pytest.fixture
def store():
    return StubRoleStore(
        {
            1: [Role.SUPERUSER],
            5: [Role.USER],
            6: [Role.USER],
        }
    )


@pytest.fixture
def make_store():
    return StubRoleStore


@pytest.fixture
def record():
    return OwnedRecord
