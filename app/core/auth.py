"""
Authentication for the room booking server.

Supports:
- Email/password credentials with bcrypt hashes
- JWT sessions carried in the ``rb_session`` cookie or a Bearer header
- Redis revocation list for signed-out sessions
- Role dependencies for admin-only endpoints
"""

from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_session
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.redis import get_redis
from app.models.user import User

log = structlog.get_logger()
settings = get_settings()

SESSION_COOKIE = "rb_session"
CSRF_COOKIE = "rb_csrf"

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    """Hash a password using bcrypt with cost factor 12."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode(), hashed.encode())


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_jwt(
    user_id: uuid.UUID,
    role: str,
    *,
    expires_delta: timedelta | None = None,
) -> tuple[str, str]:
    """Create a signed JWT. Returns (token, jti)."""
    jti = str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": exp,
        "jti": jti,
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    return token, jti


def decode_jwt(token: str) -> dict:
    """Decode and verify a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


def remaining_ttl(payload: dict) -> int:
    """Seconds until the token's expiry, never less than one."""
    exp = int(payload.get("exp", 0))
    now = int(datetime.now(timezone.utc).timestamp())
    return max(exp - now, 1)


# ---------------------------------------------------------------------------
# Signed-out sessions (Redis)
# ---------------------------------------------------------------------------

REVOKED_SESSION_KEY = "rb:session:revoked:{jti}"


async def revoke_session(jti: str, ttl_seconds: int) -> None:
    """Remember a signed-out session until its token would have expired."""
    redis = await get_redis()
    await redis.setex(REVOKED_SESSION_KEY.format(jti=jti), ttl_seconds, "1")


async def is_session_revoked(jti: str) -> bool:
    redis = await get_redis()
    return await redis.exists(REVOKED_SESSION_KEY.format(jti=jti)) > 0


# ---------------------------------------------------------------------------
# CSRF Token
# ---------------------------------------------------------------------------

def generate_csrf_token() -> str:
    """Generate a random CSRF token."""
    return secrets.token_urlsafe(32)


# ---------------------------------------------------------------------------
# Authentication dependencies
# ---------------------------------------------------------------------------

def extract_token(request: Request) -> Optional[str]:
    """Return the session token from a Bearer header or the session cookie."""
    authorization = request.headers.get("Authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization[7:].strip() or None
    return request.cookies.get(SESSION_COOKIE)


async def _authenticate_jwt(token: str, session: AsyncSession) -> User:
    """Resolve a session token to a user, re-reading the user row."""
    try:
        payload = decode_jwt(token)
        user_id = uuid.UUID(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        raise UnauthorizedError("Invalid or expired session")

    jti = payload.get("jti")
    if jti and await is_session_revoked(jti):
        raise UnauthorizedError("Session has been revoked")

    user = await session.get(User, user_id)
    if not user:
        raise UnauthorizedError("Invalid or expired session")
    return user


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> User:
    """Authenticated user for this request; 401 otherwise."""
    token = extract_token(request)
    if not token:
        raise UnauthorizedError()
    user = await _authenticate_jwt(token, session)
    request.state.user = user
    return user


async def get_optional_user(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> Optional[User]:
    """Like get_current_user, but anonymous requests resolve to None."""
    token = extract_token(request)
    if not token:
        return None
    try:
        return await _authenticate_jwt(token, session)
    except UnauthorizedError:
        log.info("auth.optional_session_rejected", path=request.url.path)
        return None


# ---------------------------------------------------------------------------
# Authorization dependencies (role checks)
# ---------------------------------------------------------------------------

async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Requires the admin role."""
    if user.role != "admin":
        raise ForbiddenError("Admin access required")
    return user
