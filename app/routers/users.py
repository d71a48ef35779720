from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.acl.models import Role
from app.models.security import User
from app.repos.factory import ReposFactory
from app.repos.users import UsersRepo
from app.schemas.security import NewUser, NewUserRole, UpdateUser, UserOut
from app.security.context import Principal
from app.security.dependencies import (
    get_repos_factory,
    get_system_users_repo,
    get_users_repo,
    require_principal,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut])
def list_users(
    offset: int = Query(default=0, ge=0),
    count: int = Query(default=100, ge=1, le=1000),
    repo: UsersRepo = Depends(get_users_repo),
) -> list[User]:
    return repo.list(offset, count)


@router.get("/me", response_model=UserOut)
def me(principal: Principal = Depends(require_principal), repo: UsersRepo = Depends(get_users_repo)) -> User:
    user = repo.find(principal.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/{id}", response_model=UserOut)
def get_user(id: int, repo: UsersRepo = Depends(get_users_repo)) -> User:
    user = repo.find(id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: NewUser,
    repo: UsersRepo = Depends(get_system_users_repo),
    factory: ReposFactory = Depends(get_repos_factory),
) -> User:
    # Registration has no principal yet: runs under the system ACL.
    if repo.email_exists(payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = repo.create(payload)
    factory.create_user_roles_repo_with_system_acl(repo.db).create(NewUserRole(user_id=user.id, role=Role.USER))
    return user


@router.put("/{id}", response_model=UserOut)
def update_user(id: int, payload: UpdateUser, repo: UsersRepo = Depends(get_users_repo)) -> User:
    user = repo.update(id, payload)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("/{id}/block", response_model=UserOut)
def block_user(id: int, repo: UsersRepo = Depends(get_users_repo)) -> User:
    user = repo.deactivate(id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
