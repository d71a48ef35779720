from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.models.security import UserRole
from app.repos.user_roles import UserRolesRepo
from app.schemas.security import NewUserRole, UserRoleOut
from app.security.dependencies import get_user_roles_repo

router = APIRouter(tags=["user_roles"])


@router.get("/users/{user_id}/roles", response_model=list[UserRoleOut])
def list_user_roles(user_id: int, repo: UserRolesRepo = Depends(get_user_roles_repo)) -> list[UserRole]:
    return repo.list_for_user(user_id)


@router.delete("/users/{user_id}/roles", response_model=list[UserRoleOut])
def delete_user_roles(user_id: int, repo: UserRolesRepo = Depends(get_user_roles_repo)) -> list[UserRole]:
    return repo.delete_by_user_id(user_id)


@router.post("/user-roles", response_model=UserRoleOut, status_code=status.HTTP_201_CREATED)
def create_user_role(payload: NewUserRole, repo: UserRolesRepo = Depends(get_user_roles_repo)) -> UserRole:
    return repo.create(payload)


@router.delete("/user-roles/{id}", response_model=UserRoleOut)
def delete_user_role(id: int, repo: UserRolesRepo = Depends(get_user_roles_repo)) -> UserRole:
    user_role = repo.delete_by_id(id)
    if user_role is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User role not found")
    return user_role
