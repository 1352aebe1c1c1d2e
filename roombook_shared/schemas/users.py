"""User, signup and login schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import UUID4, EmailStr, Field, ValidationInfo, field_validator

from .common import AuthProvider, CamelModel, UserRole


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(max_length=100)
    name: str = Field(min_length=1, max_length=100)
    confirm_password: Optional[str] = None

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is not None and value != info.data.get("password"):
            raise ValueError("Passwords don't match")
        return value


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserRoleUpdateRequest(CamelModel):
    role: UserRole


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserResponse(CamelModel):
    """Single user response."""
    id: UUID4
    email: str
    name: Optional[str] = None
    role: UserRole
    auth_provider: AuthProvider
    created_at: datetime


class SignupResponse(CamelModel):
    success: bool = True
    user: UserResponse


class SessionResponse(CamelModel):
    user: UserResponse
    expires_at: Optional[datetime] = None


class UserListResponse(CamelModel):
    """List of users."""
    data: list[UserResponse]
