"""
Permission catalog: which permissions each role grants.

The catalog is built once (from code or from YAML) and never mutated
afterwards, so it can be shared between threads without locking.

YAML shape:

    catalog:
      superuser:
        - resource: users
        - resource: user_roles
      user:
        - resource: users
          action: read
        - resource: users
          scope: owned

`action` and `scope` default to `all`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from app.acl.models import Action, Permission, Resource, Role, Scope, permission

logger = logging.getLogger(__name__)


class CatalogConfigError(ValueError):
    """Raised when a catalog YAML file is invalid."""


class PermissionCatalog:
    """Read-only role -> permissions mapping."""

    def __init__(self, grants: Mapping[Role, Iterable[Permission]]) -> None:
        self._grants: Mapping[Role, tuple[Permission, ...]] = MappingProxyType(
            {role: tuple(perms) for role, perms in grants.items()}
        )

    def permissions_for(self, role: Role) -> tuple[Permission, ...]:
        """Permissions granted to `role`; empty for roles without grants."""
        return self._grants.get(role, ())

    @property
    def roles(self) -> frozenset[Role]:
        return frozenset(self._grants)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermissionCatalog):
            return NotImplemented
        return dict(self._grants) == dict(other._grants)

    def __repr__(self) -> str:
        counts = {role.value: len(perms) for role, perms in self._grants.items()}
        return f"PermissionCatalog({counts})"


class PermissionCatalogBuilder:
    """
    Collects grants and produces a frozen PermissionCatalog.

    Usage:
        catalog = (
            PermissionCatalogBuilder()
            .grant(Role.SUPERUSER, Resource.USERS)
            .grant(Role.USER, Resource.USERS, Action.READ)
            .build()
        )
    """

    def __init__(self) -> None:
        self._grants: dict[Role, list[Permission]] = {}

    def grant(
        self,
        role: Role,
        resource: Resource,
        action: Action = Action.ALL,
        scope: Scope = Scope.ALL,
    ) -> PermissionCatalogBuilder:
        self._grants.setdefault(role, []).append(permission(resource, action, scope))
        return self

    def build(self) -> PermissionCatalog:
        return PermissionCatalog(self._grants)


def default_catalog() -> PermissionCatalog:
    """Grants the service ships with."""

    return (
        PermissionCatalogBuilder()
        .grant(Role.SUPERUSER, Resource.USERS)
        .grant(Role.SUPERUSER, Resource.USER_ROLES)
        .grant(Role.SUPERUSER, Resource.USER_DELIVERY_ADDRESSES)
        .grant(Role.USER, Resource.USERS, Action.READ)
        .grant(Role.USER, Resource.USERS, Action.ALL, Scope.OWNED)
        .grant(Role.USER, Resource.USER_ROLES, Action.READ, Scope.OWNED)
        .grant(Role.USER, Resource.USER_DELIVERY_ADDRESSES, Action.ALL, Scope.OWNED)
        .build()
    )


# ---- YAML loader ---------------------------------------------------------------------


class GrantModel(BaseModel):
    resource: Resource
    action: Action = Action.ALL
    scope: Scope = Scope.ALL


class CatalogModel(BaseModel):
    catalog: dict[Role, list[GrantModel]] = Field(default_factory=dict)


def load_catalog(path: Path) -> PermissionCatalog:
    """Load and validate a permission catalog from YAML on disk."""

    raw_text = path.read_text(encoding="utf-8")
    raw: Any = yaml.safe_load(raw_text) or {}

    if not isinstance(raw, dict) or "catalog" not in raw:
        raise CatalogConfigError(f"Missing top-level 'catalog' key in config: {path}")

    try:
        model = CatalogModel.model_validate(raw)
    except ValidationError as exc:
        raise CatalogConfigError(f"Invalid permission catalog {path}: {exc}") from exc

    builder = PermissionCatalogBuilder()
    for role, grants in model.catalog.items():
        for grant in grants:
            builder.grant(role, grant.resource, grant.action, grant.scope)

    catalog = builder.build()
    logger.debug("Permission catalog loaded path=%s catalog=%r", path, catalog)
    return catalog
