"""
Access control for the user-management service.

This package has no dependency on the web or persistence layers. Build a
PermissionCatalog and a RolesCache at startup, wrap them in an ApplicationAcl,
and call enforce() from repository operations.
"""

from .catalog import PermissionCatalog, PermissionCatalogBuilder, default_catalog, load_catalog
from .engine import SYSTEM_ACL, UNAUTHORIZED_ACL, AclEngine, ApplicationAcl, SystemAcl, UnauthorizedAcl
from .errors import (
    AclConnectionError,
    AclError,
    AclUnknownError,
    StoreConnectionError,
    StoreError,
    UnauthorizedError,
)
from .guard import enforce
from .models import Action, Permission, Resource, Role, Scope, ScopeCapability, permission
from .roles_cache import RoleStore, RolesCache

__all__ = [
    "Action",
    "AclConnectionError",
    "AclEngine",
    "AclError",
    "AclUnknownError",
    "ApplicationAcl",
    "Permission",
    "PermissionCatalog",
    "PermissionCatalogBuilder",
    "Resource",
    "Role",
    "RoleStore",
    "RolesCache",
    "SYSTEM_ACL",
    "Scope",
    "ScopeCapability",
    "StoreConnectionError",
    "StoreError",
    "SystemAcl",
    "UNAUTHORIZED_ACL",
    "UnauthorizedAcl",
    "UnauthorizedError",
    "default_catalog",
    "enforce",
    "load_catalog",
    "permission",
]
