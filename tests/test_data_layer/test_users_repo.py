"""
Tests for UsersRepo under the different ACL engines.

Uses db_session: a fresh SQLite database per test.
"""
from __future__ import annotations

import pytest
from sqlalchemy import select

from app.acl.errors import UnauthorizedError
from app.acl.models import Role
from app.models.security import User
from app.schemas.security import NewUser, NewUserRole, UpdateUser


@pytest.fixture
def people(db_session, repos_factory):
    """admin (superuser), bob and carol (users), created under the system ACL."""
    users = repos_factory.create_users_repo_with_system_acl(db_session)
    roles = repos_factory.create_user_roles_repo_with_system_acl(db_session)

    admin = users.create(NewUser(email="admin@example.com"))
    roles.create(NewUserRole(user_id=admin.id, role=Role.SUPERUSER))
    bob = users.create(NewUser(email="bob@example.com", first_name="Bob"))
    roles.create(NewUserRole(user_id=bob.id, role=Role.USER))
    carol = users.create(NewUser(email="carol@example.com", first_name="Carol"))
    roles.create(NewUserRole(user_id=carol.id, role=Role.USER))

    return {"admin": admin.id, "bob": bob.id, "carol": carol.id}


def test_any_user_can_read_any_user(db_session, repos_factory, people):
    repo = repos_factory.create_users_repo(db_session, people["bob"])

    found = repo.find(people["carol"])

    assert found is not None
    assert found.email == "carol@example.com"
    assert repo.find_by_email("admin@example.com").id == people["admin"]


def test_find_missing_user_returns_none(db_session, repos_factory, people):
    repo = repos_factory.create_users_repo(db_session, people["bob"])
    assert repo.find(9999) is None


def test_anonymous_cannot_read(db_session, repos_factory, people):
    repo = repos_factory.create_users_repo(db_session, None)

    with pytest.raises(UnauthorizedError):
        repo.find(people["bob"])
    with pytest.raises(UnauthorizedError):
        repo.email_exists("bob@example.com")


def test_list_returns_active_users_in_id_order(db_session, repos_factory, people):
    repo = repos_factory.create_users_repo(db_session, people["bob"])

    listed = repo.list(offset=people["bob"], count=10)

    assert [u.id for u in listed] == [people["bob"], people["carol"]]


def test_user_updates_own_record(db_session, repos_factory, people):
    repo = repos_factory.create_users_repo(db_session, people["bob"])

    updated = repo.update(people["bob"], UpdateUser(last_name="Builder"))

    assert updated.last_name == "Builder"
    assert updated.first_name == "Bob"


def test_user_cannot_update_someone_else(db_session, repos_factory, people):
    repo = repos_factory.create_users_repo(db_session, people["bob"])

    with pytest.raises(UnauthorizedError):
        repo.update(people["carol"], UpdateUser(last_name="Hacked"))

    carol = db_session.get(User, people["carol"])
    assert carol.last_name is None


def test_superuser_updates_anyone(db_session, repos_factory, people):
    repo = repos_factory.create_users_repo(db_session, people["admin"])
    assert repo.update(people["carol"], UpdateUser(phone="+100")).phone == "+100"


def test_deactivate_requires_block_permission(db_session, repos_factory, people):
    bob_repo = repos_factory.create_users_repo(db_session, people["bob"])
    with pytest.raises(UnauthorizedError):
        bob_repo.deactivate(people["carol"])

    admin_repo = repos_factory.create_users_repo(db_session, people["admin"])
    blocked = admin_repo.deactivate(people["carol"])

    assert blocked.is_active is False
    assert admin_repo.deactivate(people["carol"]) is None
    assert people["carol"] not in [u.id for u in admin_repo.list()]


def test_create_is_checked_after_insert(db_session, repos_factory, people):
    # A regular user has no create grant for users; the row is flushed first.
    repo = repos_factory.create_users_repo(db_session, people["bob"])

    with pytest.raises(UnauthorizedError):
        repo.create(NewUser(email="dave@example.com"))


def test_superuser_creates_users(db_session, repos_factory, people):
    repo = repos_factory.create_users_repo(db_session, people["admin"])

    created = repo.create(NewUser(email="erin@example.com"))

    assert db_session.scalars(select(User).where(User.email == "erin@example.com")).one().id == created.id


def test_rejected_create_is_not_committed_by_a_later_write(db_session, repos_factory, people):
    repo = repos_factory.create_users_repo(db_session, people["bob"])

    with pytest.raises(UnauthorizedError):
        repo.create(NewUser(email="dave@example.com"))
    repo.update(people["bob"], UpdateUser(last_name="Builder"))

    assert repo.find_by_email("dave@example.com") is None
    assert db_session.get(User, people["bob"]).last_name == "Builder"


def test_anonymous_create_is_rejected_before_insert(db_session, repos_factory, people):
    repo = repos_factory.create_users_repo(db_session, None)

    with pytest.raises(UnauthorizedError):
        repo.create(NewUser(email="dave@example.com"))

    assert not db_session.new
    assert db_session.scalars(select(User).where(User.email == "dave@example.com")).first() is None
