"""
Role assignments (user has-many roles).

Every successful mutation commits first and then drops the affected user from
the roles cache, so the next ACL check for that user re-reads the store. A
failed or rejected mutation leaves the cache alone.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.acl.engine import AclEngine
from app.acl.guard import enforce
from app.acl.models import Action, Resource, Role
from app.acl.roles_cache import RolesCache
from app.models.security import UserRole
from app.schemas.security import NewUserRole

logger = logging.getLogger(__name__)


class UserRolesRepo:
    def __init__(self, db: Session, acl: AclEngine, user_id: int | None, roles_cache: RolesCache) -> None:
        self.db = db
        self.acl = acl
        self.user_id = user_id
        self.roles_cache = roles_cache

    def list_for_user(self, user_id: int) -> list[UserRole]:
        stmt = select(UserRole).where(UserRole.user_id == user_id).order_by(UserRole.id)
        user_roles = list(self.db.scalars(stmt).all())
        enforce(self.acl, Resource.USER_ROLES, Action.READ, self.user_id, user_roles)
        return user_roles

    def create(self, payload: NewUserRole) -> UserRole:
        user_role = UserRole(user_id=payload.user_id, role=payload.role)
        # Owner is known from the payload: check before anything is written.
        enforce(self.acl, Resource.USER_ROLES, Action.CREATE, self.user_id, [user_role])
        self.db.add(user_role)
        self.db.commit()

        self.roles_cache.remove(user_role.user_id)
        logger.info("Role assigned user_id=%s role=%s by=%s", user_role.user_id, user_role.role.value, self.user_id)
        return user_role

    def delete_by_id(self, role_id: int) -> UserRole | None:
        user_role = self.db.get(UserRole, role_id)
        if user_role is None:
            return None
        self._delete([user_role])
        return user_role

    def delete_by_user_id(self, user_id: int) -> list[UserRole]:
        user_roles = list(self.db.scalars(select(UserRole).where(UserRole.user_id == user_id)).all())
        self._delete(user_roles)
        # Checked by _delete even when no rows exist; the cache may still hold a stale entry.
        self.roles_cache.remove(user_id)
        return user_roles

    def delete_user_role(self, user_id: int, role: Role) -> UserRole | None:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
        user_role = self.db.scalars(stmt).first()
        if user_role is None:
            return None
        self._delete([user_role])
        return user_role

    def _delete(self, user_roles: list[UserRole]) -> None:
        enforce(self.acl, Resource.USER_ROLES, Action.DELETE, self.user_id, user_roles)
        if not user_roles:
            return

        affected_users = {r.user_id for r in user_roles}
        removed_ids = [r.id for r in user_roles]
        for user_role in user_roles:
            self.db.delete(user_role)
        self.db.commit()

        for affected in affected_users:
            self.roles_cache.remove(affected)
        logger.info("Roles removed ids=%s by=%s", removed_ids, self.user_id)
