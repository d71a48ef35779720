"""
Authorization vocabulary: roles, resources, actions, scopes and permissions.

Everything here is immutable. Roles, resources, actions and scopes are closed
enumerations; a Permission is a frozen (resource, action, scope) triple.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class Role(str, Enum):
    SUPERUSER = "superuser"
    USER = "user"


class Resource(str, Enum):
    USERS = "users"
    USER_ROLES = "user_roles"
    USER_DELIVERY_ADDRESSES = "user_delivery_addresses"

    def __str__(self) -> str:
        return self.value.replace("_", " ")


class Action(str, Enum):
    """
    Operation categories.

    `ALL` is a wildcard: a permission granted with `ALL` matches every
    concrete action. It is never treated as a wildcard on the request side.
    """

    ALL = "all"
    INDEX = "index"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    BLOCK = "block"

    def __str__(self) -> str:
        return self.value


class Scope(str, Enum):
    ALL = "all"
    OWNED = "owned"

    def allows(self, acting_user_id: int | None, owner_id: int | None) -> bool:
        """
        Decide a scope for an instance owned by `owner_id`.

        `OWNED` fails closed when either id is unknown.
        """

        if self is Scope.ALL:
            return True
        if acting_user_id is None or owner_id is None:
            return False
        return acting_user_id == owner_id


@dataclass(frozen=True)
class Permission:
    """Single grant: `action` on `resource`, limited to `scope`."""

    resource: Resource
    action: Action = Action.ALL
    scope: Scope = Scope.ALL

    def matches(self, resource: Resource, action: Action) -> bool:
        return self.resource == resource and (self.action == action or self.action is Action.ALL)


def permission(resource: Resource, action: Action = Action.ALL, scope: Scope = Scope.ALL) -> Permission:
    return Permission(resource=resource, action=action, scope=scope)


@runtime_checkable
class ScopeCapability(Protocol):
    """
    Implemented by every protected entity type.

    Answers whether this concrete instance falls within `scope` for the
    acting user.
    """

    def is_in_scope(self, scope: Scope, acting_user_id: int | None) -> bool: ...
