from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.auth.models.user import UserRole


class UserResponse(BaseModel):
    id: UUID
    email: str
    full_name: str | None = None
    role: UserRole
    is_active: bool
    avatar_url: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    """Account created by a manager from the settings page."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str | None = Field(None, max_length=255)
    role: UserRole = UserRole.CLIENT


class UserRoleUpdate(BaseModel):
    role: UserRole
