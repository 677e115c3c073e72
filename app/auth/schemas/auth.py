from pydantic import BaseModel, EmailStr, Field

from app.auth.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login request schema"""

    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    """Self-service sign-up; new accounts always get the client role."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str | None = Field(None, max_length=255)


class LoginResponse(BaseModel):
    """
    Returned after login or registration.
    Tokens travel in httpOnly cookies, the body carries the profile.
    """

    user: UserResponse


class RefreshResponse(BaseModel):
    message: str = "Token refreshed"


class LogoutResponse(BaseModel):
    message: str = "Successfully logged out"
