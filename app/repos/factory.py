from __future__ import annotations

from sqlalchemy.orm import Session

from app.acl.catalog import PermissionCatalog
from app.acl.engine import SYSTEM_ACL, UNAUTHORIZED_ACL, AclEngine, ApplicationAcl
from app.acl.roles_cache import RolesCache
from app.repos.delivery_addresses import UserDeliveryAddressesRepo
from app.repos.user_roles import UserRolesRepo
from app.repos.users import UsersRepo


class ReposFactory:
    """
    Builds request-scoped repositories.

    Holds the process-wide catalog and roles cache (built once at startup)
    and picks the ACL engine per request: no principal gets the
    unauthorized engine, an authenticated user gets the application engine.
    """

    def __init__(self, catalog: PermissionCatalog, roles_cache: RolesCache) -> None:
        self.roles_cache = roles_cache
        self.acl = ApplicationAcl(catalog, roles_cache)

    def engine_for(self, user_id: int | None) -> AclEngine:
        if user_id is None:
            return UNAUTHORIZED_ACL
        return self.acl

    def create_users_repo(self, db: Session, user_id: int | None) -> UsersRepo:
        return UsersRepo(db, self.engine_for(user_id), user_id)

    def create_users_repo_with_system_acl(self, db: Session) -> UsersRepo:
        return UsersRepo(db, SYSTEM_ACL, None)

    def create_user_roles_repo(self, db: Session, user_id: int | None) -> UserRolesRepo:
        return UserRolesRepo(db, self.engine_for(user_id), user_id, self.roles_cache)

    def create_user_roles_repo_with_system_acl(self, db: Session) -> UserRolesRepo:
        return UserRolesRepo(db, SYSTEM_ACL, None, self.roles_cache)

    def create_delivery_addresses_repo(self, db: Session, user_id: int | None) -> UserDeliveryAddressesRepo:
        return UserDeliveryAddressesRepo(db, self.engine_for(user_id), user_id)

    def create_delivery_addresses_repo_with_system_acl(self, db: Session) -> UserDeliveryAddressesRepo:
        return UserDeliveryAddressesRepo(db, SYSTEM_ACL, None)
