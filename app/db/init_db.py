from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session, sessionmaker

from app.acl.models import Role
from app.db.base import Base
from app.models import addresses as _addresses  # noqa: F401  (register table)
from app.models.security import User
from app.repos.factory import ReposFactory
from app.schemas.addresses import NewDeliveryAddress
from app.schemas.security import NewUser, NewUserRole


def init_db(engine: Engine, session_factory: sessionmaker[Session], factory: ReposFactory, seed: bool = True) -> None:
    """
    Create tables and, optionally, seed demo data.

    Seeding runs under the system ACL: there is no principal at startup.
    """

    Base.metadata.create_all(bind=engine)
    if not seed:
        return

    with session_factory() as db:
        if _has_seed_data(db):
            return
        _seed(db, factory)


def _has_seed_data(db: Session) -> bool:
    return db.execute(select(User.id).limit(1)).first() is not None


def _seed(db: Session, factory: ReposFactory) -> None:
    users = factory.create_users_repo_with_system_acl(db)
    roles = factory.create_user_roles_repo_with_system_acl(db)

    admin = users.create(NewUser(email="alice.admin@example.com", first_name="Alice", last_name="Admin"))
    roles.create(NewUserRole(user_id=admin.id, role=Role.SUPERUSER))

    bob = users.create(NewUser(email="bob@example.com", first_name="Bob"))
    roles.create(NewUserRole(user_id=bob.id, role=Role.USER))

    carol = users.create(NewUser(email="carol@example.com", first_name="Carol"))
    roles.create(NewUserRole(user_id=carol.id, role=Role.USER))

    addresses = factory.create_delivery_addresses_repo_with_system_acl(db)
    addresses.create(
        NewDeliveryAddress(user_id=bob.id, country="DE", postal_code="10115", locality="Berlin", is_priority=True)
    )
