"""Tests for UserDeliveryAddressesRepo: owner-scoped access, dedupe and priority."""
from __future__ import annotations

import pytest
from sqlalchemy import select

from app.acl.errors import UnauthorizedError
from app.acl.models import Role
from app.models.addresses import UserDeliveryAddress
from app.schemas.addresses import NewDeliveryAddress, UpdateDeliveryAddress
from app.schemas.security import NewUser, NewUserRole


@pytest.fixture
def people(db_session, repos_factory):
    users = repos_factory.create_users_repo_with_system_acl(db_session)
    roles = repos_factory.create_user_roles_repo_with_system_acl(db_session)

    admin = users.create(NewUser(email="admin@example.com"))
    roles.create(NewUserRole(user_id=admin.id, role=Role.SUPERUSER))
    bob = users.create(NewUser(email="bob@example.com"))
    roles.create(NewUserRole(user_id=bob.id, role=Role.USER))
    carol = users.create(NewUser(email="carol@example.com"))
    roles.create(NewUserRole(user_id=carol.id, role=Role.USER))

    return {"admin": admin.id, "bob": bob.id, "carol": carol.id}


def _address(user_id: int, **overrides) -> NewDeliveryAddress:
    fields = {"user_id": user_id, "country": "DE", "postal_code": "10115", "locality": "Berlin"}
    fields.update(overrides)
    return NewDeliveryAddress(**fields)


def test_user_creates_and_lists_own_addresses(db_session, repos_factory, people):
    repo = repos_factory.create_delivery_addresses_repo(db_session, people["bob"])

    first = repo.create(_address(people["bob"]))
    second = repo.create(_address(people["bob"], postal_code="20095", locality="Hamburg"))

    assert [a.id for a in repo.list_for_user(people["bob"])] == [second.id, first.id]


def test_create_for_someone_else_is_rejected(db_session, repos_factory, people):
    repo = repos_factory.create_delivery_addresses_repo(db_session, people["bob"])
    with pytest.raises(UnauthorizedError):
        repo.create(_address(people["carol"]))


def test_identical_address_is_not_duplicated(db_session, repos_factory, people):
    repo = repos_factory.create_delivery_addresses_repo(db_session, people["bob"])

    first = repo.create(_address(people["bob"], route="Unter den Linden"))
    again = repo.create(_address(people["bob"], route="Unter den Linden"))

    assert again.id == first.id
    assert len(repo.list_for_user(people["bob"])) == 1


def test_priority_address_clears_other_priorities(db_session, repos_factory, people):
    repo = repos_factory.create_delivery_addresses_repo(db_session, people["bob"])
    old = repo.create(_address(people["bob"], is_priority=True))
    new = repo.create(_address(people["bob"], postal_code="80331", locality="Munich", is_priority=True))

    db_session.expire_all()
    assert db_session.get(UserDeliveryAddress, old.id).is_priority is False
    assert db_session.get(UserDeliveryAddress, new.id).is_priority is True


def test_update_and_delete_are_owner_scoped(db_session, repos_factory, people):
    bob_repo = repos_factory.create_delivery_addresses_repo(db_session, people["bob"])
    carol_repo = repos_factory.create_delivery_addresses_repo(db_session, people["carol"])
    address = bob_repo.create(_address(people["bob"]))

    with pytest.raises(UnauthorizedError):
        carol_repo.update(address.id, UpdateDeliveryAddress(locality="Potsdam"))
    with pytest.raises(UnauthorizedError):
        carol_repo.delete(address.id)
    with pytest.raises(UnauthorizedError):
        carol_repo.list_for_user(people["bob"])

    updated = bob_repo.update(address.id, UpdateDeliveryAddress(locality="Potsdam", country=None))
    assert updated.locality == "Potsdam"
    assert updated.country == "DE"

    assert bob_repo.delete(address.id).id == address.id
    assert bob_repo.delete(address.id) is None


def test_superuser_manages_any_address(db_session, repos_factory, people):
    admin_repo = repos_factory.create_delivery_addresses_repo(db_session, people["admin"])

    address = admin_repo.create(_address(people["carol"]))

    assert admin_repo.list_for_user(people["carol"])[0].id == address.id
    assert admin_repo.update(address.id, UpdateDeliveryAddress(street_number="7")).street_number == "7"


def test_rejected_create_leaves_nothing_for_a_later_commit(db_session, repos_factory, people):
    repo = repos_factory.create_delivery_addresses_repo(db_session, people["bob"])

    with pytest.raises(UnauthorizedError):
        repo.create(_address(people["carol"]))
    repo.create(_address(people["bob"]))

    stmt = select(UserDeliveryAddress).where(UserDeliveryAddress.user_id == people["carol"])
    assert db_session.scalars(stmt).all() == []
