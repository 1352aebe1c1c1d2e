"""User model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    email: str = Field(unique=True, index=True, nullable=False)
    name: Optional[str] = None
    role: str = Field(nullable=False, default="user")  # user | officer | admin
    password_hash: Optional[str] = Field(default=None)  # bcrypt hash for credentials login
    auth_provider: str = Field(nullable=False, default="credentials")  # credentials | google
