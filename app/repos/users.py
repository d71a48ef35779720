from __future__ import annotations

import logging

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from app.acl.engine import AclEngine
from app.acl.errors import AclError
from app.acl.guard import enforce
from app.acl.models import Action, Resource
from app.models.security import User
from app.schemas.security import NewUser, UpdateUser

logger = logging.getLogger(__name__)


class UsersRepo:
    """CRUD over `users`, guarded by the request's ACL engine."""

    def __init__(self, db: Session, acl: AclEngine, user_id: int | None) -> None:
        self.db = db
        self.acl = acl
        self.user_id = user_id

    def find(self, user_id: int) -> User | None:
        user = self.db.get(User, user_id)
        if user is not None:
            enforce(self.acl, Resource.USERS, Action.READ, self.user_id, [user])
        return user

    def find_by_email(self, email: str) -> User | None:
        user = self.db.scalars(select(User).where(User.email == email)).first()
        if user is not None:
            enforce(self.acl, Resource.USERS, Action.READ, self.user_id, [user])
        return user

    def email_exists(self, email: str) -> bool:
        found = bool(self.db.scalar(select(exists().where(User.email == email))))
        enforce(self.acl, Resource.USERS, Action.READ, self.user_id)
        return found

    def list(self, offset: int = 0, count: int = 100) -> list[User]:
        """Active users with id >= `offset`, at most `count` of them."""
        stmt = select(User).where(User.is_active.is_(True), User.id >= offset).order_by(User.id).limit(count)
        users = list(self.db.scalars(stmt).all())
        enforce(self.acl, Resource.USERS, Action.READ, self.user_id, users)
        return users

    def create(self, payload: NewUser) -> User:
        """
        Insert a user.

        The action is checked before the insert, which also resolves the
        acting user's roles while nothing is pending. The owner scope needs
        the new id and is checked after the flush; a rejected row is rolled
        back.
        """

        enforce(self.acl, Resource.USERS, Action.CREATE, self.user_id)
        user = User(**payload.model_dump())
        self.db.add(user)
        self.db.flush()
        try:
            enforce(self.acl, Resource.USERS, Action.CREATE, self.user_id, [user])
        except AclError:
            self.db.rollback()
            raise
        self.db.commit()
        logger.info("User created id=%s", user.id)
        return user

    def update(self, user_id: int, payload: UpdateUser) -> User | None:
        user = self._find_active(user_id)
        if user is None:
            return None
        enforce(self.acl, Resource.USERS, Action.UPDATE, self.user_id, [user])

        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        self.db.commit()
        return user

    def deactivate(self, user_id: int) -> User | None:
        user = self._find_active(user_id)
        if user is None:
            return None
        enforce(self.acl, Resource.USERS, Action.BLOCK, self.user_id, [user])

        user.is_active = False
        self.db.commit()
        logger.info("User deactivated id=%s by=%s", user.id, self.user_id)
        return user

    def _find_active(self, user_id: int) -> User | None:
        return self.db.scalars(select(User).where(User.id == user_id, User.is_active.is_(True))).first()
