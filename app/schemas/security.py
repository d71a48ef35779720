from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.acl.models import Role


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    phone: str | None
    first_name: str | None
    last_name: str | None
    is_active: bool
    created_at: datetime


class NewUser(BaseModel):
    email: str = Field(min_length=3, max_length=100)
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class UpdateUser(BaseModel):
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class UserRoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    role: Role


class NewUserRole(BaseModel):
    user_id: int
    role: Role
