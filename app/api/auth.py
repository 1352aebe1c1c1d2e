"""
Authentication endpoints.

- Email/password signup and login
- JWT session cookie + CSRF cookie issuance
- Logout with server-side revocation
"""

from __future__ import annotations

from datetime import datetime, timezone

import jwt
import structlog
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import (
    CSRF_COOKIE,
    SESSION_COOKIE,
    create_jwt,
    decode_jwt,
    extract_token,
    generate_csrf_token,
    get_current_user,
    remaining_ttl,
    revoke_session,
)
from app.core.config import get_settings
from app.core.database import get_session
from app.models.user import User
from app.services import users as user_service

from roombook_shared.schemas.users import (
    LoginRequest,
    SessionResponse,
    SignupRequest,
    SignupResponse,
    UserResponse,
)

log = structlog.get_logger()
settings = get_settings()
router = APIRouter()


def _cookie_options(*, httponly: bool) -> dict:
    return {
        "httponly": httponly,
        "secure": not settings.debug,
        "samesite": "lax",
        "path": "/",
        "max_age": settings.jwt_expire_minutes * 60,
    }


def _start_session(response: Response, user: User) -> datetime | None:
    """Issue a session token plus the JS-readable CSRF cookie; returns expiry."""
    token, _jti = create_jwt(user.id, user.role)
    response.set_cookie(SESSION_COOKIE, token, **_cookie_options(httponly=True))
    response.set_cookie(CSRF_COOKIE, generate_csrf_token(), **_cookie_options(httponly=False))
    return _expiry(token)


def _expiry(token: str) -> datetime | None:
    try:
        payload = decode_jwt(token)
    except jwt.PyJWTError:
        return None
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)


@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup(
    body: SignupRequest,
    session: AsyncSession = Depends(get_session),
):
    """Register a credentials account. Does not sign the user in."""
    user = await user_service.register_user(body, session)
    return SignupResponse(success=True, user=UserResponse.model_validate(user))


@router.post("/login", response_model=SessionResponse)
async def login(
    body: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
):
    """Check credentials and start a cookie session."""
    user = await user_service.authenticate(body.email, body.password, session)
    expires_at = _start_session(response, user)
    log.info("auth.login_success", user_id=str(user.id), role=user.role)
    return SessionResponse(user=UserResponse.model_validate(user), expires_at=expires_at)


@router.get("/session", response_model=SessionResponse)
async def current_session(
    request: Request,
    user: User = Depends(get_current_user),
):
    """The signed-in user."""
    token = extract_token(request)
    return SessionResponse(
        user=UserResponse.model_validate(user),
        expires_at=_expiry(token) if token else None,
    )


@router.post("/logout")
async def logout(request: Request, response: Response):
    """Invalidate the current session."""
    token = extract_token(request)
    if token:
        try:
            payload = decode_jwt(token)
        except jwt.PyJWTError:
            log.info("auth.logout_stale_session")
        else:
            jti = payload.get("jti")
            if jti:
                await revoke_session(jti, ttl_seconds=remaining_ttl(payload))
                log.info("auth.logout", user_id=payload.get("sub"))

    response.delete_cookie(SESSION_COOKIE, path="/")
    response.delete_cookie(CSRF_COOKIE, path="/")
    return {"success": True}
