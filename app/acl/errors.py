"""Error taxonomy for role stores and the ACL layer."""

from __future__ import annotations

from app.acl.models import Action, Resource


class StoreError(Exception):
    """Raised by a role store for any failure other than connectivity."""


class StoreConnectionError(StoreError):
    """Raised by a role store when its backend cannot be reached in time."""


class AclError(Exception):
    """Base class for authorization failures."""


class UnauthorizedError(AclError):
    """The acting principal may not perform `action` on `resource`."""

    def __init__(self, resource: Resource, action: Action) -> None:
        super().__init__(f"Unauthorized: cannot {str(action)} {str(resource)}")
        self.resource = resource
        self.action = action


class AclConnectionError(AclError):
    """Roles could not be resolved because the role store is unreachable."""


class AclUnknownError(AclError):
    """Roles could not be resolved for any other reason."""
