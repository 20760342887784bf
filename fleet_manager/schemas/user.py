# fleet_manager/schemas/user.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenOut(BaseModel):
    token: str


class PermissionSet(BaseModel):
    canView: bool = False
    canEdit: bool = False
    canExport: bool = False
    canManageUsers: bool = False


class PermissionUpdate(BaseModel):
    """Partial update: omitted flags keep their stored value."""
    permissions: dict[str, Optional[bool]]


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
    permissions: PermissionSet   # effective set (all true for admins)
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class UserLimitOut(BaseModel):
    is_limit_reached: bool
    user_count: int
    max_users: int
