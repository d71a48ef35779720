"""
ACL engines.

Three implementations share one contract (`AclEngine.can`):

- ApplicationAcl: the real decision, from cached roles and the catalog.
- SystemAcl: always allows; server-internal operations with no principal.
- UnauthorizedAcl: always denies; requests without an authenticated principal.

The engine is picked once per request (see app.repos.factory).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from app.acl.catalog import PermissionCatalog
from app.acl.errors import AclConnectionError, AclUnknownError, StoreConnectionError, StoreError
from app.acl.models import Action, Permission, Resource, ScopeCapability
from app.acl.roles_cache import RolesCache

logger = logging.getLogger(__name__)


class AclEngine(Protocol):
    def can(
        self,
        resource: Resource,
        action: Action,
        acting_user_id: int | None,
        candidates: Sequence[ScopeCapability] = (),
    ) -> bool:
        """
        Decide whether `acting_user_id` may do `action` on `resource`.

        `candidates` are the concrete instances involved; each must be in
        scope for the permission that grants access.
        """
        ...


class SystemAcl:
    def can(
        self,
        resource: Resource,
        action: Action,
        acting_user_id: int | None,
        candidates: Sequence[ScopeCapability] = (),
    ) -> bool:
        return True


class UnauthorizedAcl:
    def can(
        self,
        resource: Resource,
        action: Action,
        acting_user_id: int | None,
        candidates: Sequence[ScopeCapability] = (),
    ) -> bool:
        return False


SYSTEM_ACL = SystemAcl()
UNAUTHORIZED_ACL = UnauthorizedAcl()


class ApplicationAcl:
    """
    Role based ACL with owned/all scoping.

    Usage:
        acl = ApplicationAcl(default_catalog(), roles_cache)
        allowed = acl.can(Resource.USERS, Action.UPDATE, 5, [user])
    """

    def __init__(self, catalog: PermissionCatalog, roles_cache: RolesCache) -> None:
        self._catalog = catalog
        self._roles_cache = roles_cache

    @property
    def catalog(self) -> PermissionCatalog:
        return self._catalog

    @property
    def roles_cache(self) -> RolesCache:
        return self._roles_cache

    def can(
        self,
        resource: Resource,
        action: Action,
        acting_user_id: int | None,
        candidates: Sequence[ScopeCapability] = (),
    ) -> bool:
        """
        Algorithm:
        1. Resolve the acting user's roles through the cache.
        2. Collect the catalog permissions of every role.
        3. Keep those for `resource` whose action is `action` or ALL.
        4. A permission is usable if every candidate is in its scope.
        5. Allow if at least one permission is usable.

        Permissions are never combined across roles: one permission has to
        clear the scope check for all candidates on its own.
        """

        if acting_user_id is None:
            logger.debug("ACL: denied, no acting user resource=%s action=%s", resource, action)
            return False

        try:
            roles = self._roles_cache.get(acting_user_id)
        except StoreConnectionError as exc:
            logger.warning("ACL: role store unreachable user_id=%s error=%s", acting_user_id, exc)
            raise AclConnectionError(f"Cannot resolve roles for user {acting_user_id}") from exc
        except StoreError as exc:
            logger.warning("ACL: role store failure user_id=%s error=%s", acting_user_id, exc)
            raise AclUnknownError(f"Cannot resolve roles for user {acting_user_id}") from exc

        matching: list[Permission] = [
            perm
            for role in roles
            for perm in self._catalog.permissions_for(role)
            if perm.matches(resource, action)
        ]

        for perm in matching:
            if all(candidate.is_in_scope(perm.scope, acting_user_id) for candidate in candidates):
                logger.debug(
                    "ACL: allowed user_id=%s roles=%s resource=%s action=%s scope=%s",
                    acting_user_id,
                    sorted(r.value for r in roles),
                    resource.value,
                    action.value,
                    perm.scope.value,
                )
                return True

        logger.debug(
            "ACL: denied user_id=%s roles=%s resource=%s action=%s matching=%s candidates=%s",
            acting_user_id,
            sorted(r.value for r in roles),
            resource.value,
            action.value,
            len(matching),
            len(candidates),
        )
        return False
