"""
User service: credential signup/login and admin role management.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import hash_password, verify_password
from app.core.config import get_settings
from app.core.errors import NotFoundError, UnauthorizedError, ValidationError
from app.models.user import User
from app.repositories.users import UserRepository

from roombook_shared.schemas.common import AuthProvider, UserRole
from roombook_shared.schemas.users import SignupRequest

log = structlog.get_logger()

MIN_PASSWORD_LENGTH = 8


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def register_user(req: SignupRequest, session: AsyncSession) -> User:
    """Create a credentials account."""
    settings = get_settings()
    email = _normalize_email(req.email)

    domain = settings.allowed_email_domain
    if domain and not email.endswith("@" + domain.lower().lstrip("@")):
        raise ValidationError(f"Must be a @{domain.lstrip('@')} email address", field="email")
    if len(req.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )

    users = UserRepository(session)
    if await users.get_by_email(email):
        raise ValidationError("An account with this email already exists", field="email")

    admins = {_normalize_email(e) for e in settings.admin_emails}
    role = UserRole.ADMIN if email in admins else UserRole.USER
    user = await users.create(
        email=email,
        name=req.name.strip(),
        role=role.value,
        password_hash=hash_password(req.password),
        auth_provider=AuthProvider.CREDENTIALS.value,
    )
    log.info("user.registered", user_id=str(user.id), role=user.role)
    return user


async def authenticate(email: str, password: str, session: AsyncSession) -> User:
    """Check credentials. The failure message never says which part was wrong."""
    user = await UserRepository(session).get_by_email(_normalize_email(email))
    if not user or not user.password_hash or not verify_password(password, user.password_hash):
        log.info("auth.login_failed")
        raise UnauthorizedError("Invalid email or password")
    return user


async def list_users(session: AsyncSession, role: Optional[UserRole] = None) -> list[User]:
    return await UserRepository(session).list(role.value if role else None)


async def change_role(
    user_id: uuid.UUID, role: UserRole, acting_user: User, session: AsyncSession
) -> User:
    users = UserRepository(session)
    user = await users.get(user_id)
    if not user:
        raise NotFoundError("User not found")
    if user.id == acting_user.id and role != UserRole.ADMIN:
        raise ValidationError("You cannot remove your own admin role", field="role")

    previous = user.role
    user = await users.update(user, role=role.value)
    log.info(
        "user.role_changed",
        user_id=str(user.id),
        by=str(acting_user.id),
        previous=previous,
        role=user.role,
    )
    return user
