from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.repos.delivery_addresses import UserDeliveryAddressesRepo
from app.repos.factory import ReposFactory
from app.repos.user_roles import UserRolesRepo
from app.repos.users import UsersRepo
from app.security.auth import authenticate
from app.security.context import Principal
from app.settings import Settings


def get_app_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise RuntimeError("Settings not loaded. Did create_app() run?")
    return settings


def get_repos_factory(request: Request) -> ReposFactory:
    factory = getattr(request.app.state, "repos_factory", None)
    if factory is None:
        raise RuntimeError("Repos factory not configured. Did create_app() run?")
    return factory


def get_principal(request: Request, settings: Settings = Depends(get_app_settings)) -> Principal:
    principal = authenticate(request, settings)
    request.state.principal = principal
    return principal


def require_principal(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return principal


def get_users_repo(
    principal: Principal = Depends(get_principal),
    factory: ReposFactory = Depends(get_repos_factory),
    db: Session = Depends(get_db),
) -> UsersRepo:
    return factory.create_users_repo(db, principal.user_id)


def get_system_users_repo(
    factory: ReposFactory = Depends(get_repos_factory),
    db: Session = Depends(get_db),
) -> UsersRepo:
    return factory.create_users_repo_with_system_acl(db)


def get_user_roles_repo(
    principal: Principal = Depends(get_principal),
    factory: ReposFactory = Depends(get_repos_factory),
    db: Session = Depends(get_db),
) -> UserRolesRepo:
    return factory.create_user_roles_repo(db, principal.user_id)


def get_delivery_addresses_repo(
    principal: Principal = Depends(get_principal),
    factory: ReposFactory = Depends(get_repos_factory),
    db: Session = Depends(get_db),
) -> UserDeliveryAddressesRepo:
    return factory.create_delivery_addresses_repo(db, principal.user_id)
