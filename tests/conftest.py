"""
Shared fixtures: in-memory SQLite through aiosqlite, the app wired to it,
and an in-memory stand-in for the Redis revocation list.
"""

from __future__ import annotations

import os

os.environ.setdefault("RB_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("RB_SECRET_KEY", "test-secret-key-with-at-least-32-bytes!")
os.environ.setdefault("RB_ADMIN_EMAILS", '["boss@example.edu"]')
os.environ.setdefault("RB_LOG_FORMAT", "console")

import datetime as dt
import uuid
from typing import Optional
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401  populate metadata
from app.core.auth import create_jwt, hash_password
from app.core.database import get_session
from app.main import app as fastapi_app
from app.models.booking import Booking, BookingParticipant
from app.models.membership import OrgMembership
from app.models.organization import Organization
from app.models.room import Room
from app.models.user import User


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the revocation list."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.store[key] = value

    async def exists(self, key: str) -> int:
        return int(key in self.store)

    async def ping(self) -> bool:
        return True


@pytest.fixture(autouse=True)
def fake_redis():
    redis = FakeRedis()
    with patch("app.core.auth.get_redis", AsyncMock(return_value=redis)):
        yield redis


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def _get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_session] = _get_session
    async with AsyncClient(
        transport=ASGITransport(app=fastapi_app), base_url="http://test"
    ) as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories (each commits, so the app sees the rows)
# ---------------------------------------------------------------------------

def auth_headers(user: User) -> dict[str, str]:
    token, _ = create_jwt(user.id, user.role)
    return {"Authorization": f"Bearer {token}"}


def future_date(days: int = 7) -> dt.date:
    return dt.date.today() + dt.timedelta(days=days)


@pytest.fixture
def headers_for():
    """Bearer headers for a user; Bearer requests skip the CSRF check."""
    return auth_headers


@pytest.fixture
def make_user(session):
    async def _make(
        role: str = "user",
        email: Optional[str] = None,
        name: str = "Test User",
        password: Optional[str] = None,
    ) -> User:
        user = User(
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.edu",
            name=name,
            role=role,
            password_hash=hash_password(password) if password else None,
        )
        session.add(user)
        await session.commit()
        return user

    return _make


@pytest.fixture
def make_room(session):
    async def _make(name: str, category: str = "small", capacity: int = 4) -> Room:
        room = Room(name=name, category=category, capacity=capacity)
        session.add(room)
        await session.commit()
        return room

    return _make


@pytest.fixture
async def rooms(make_room):
    """Two small rooms and one large room."""
    return [
        await make_room("Study Room 101", "small", 4),
        await make_room("Study Room 102", "small", 4),
        await make_room("Study Room 201", "large", 12),
    ]


@pytest.fixture
def make_org(session):
    async def _make(name: str = "Chess Club", slug: Optional[str] = None) -> Organization:
        org = Organization(name=name, slug=slug or f"org-{uuid.uuid4().hex[:8]}")
        session.add(org)
        await session.commit()
        return org

    return _make


@pytest.fixture
def make_membership(session):
    async def _make(user: User, org: Organization, role: str = "member") -> OrgMembership:
        membership = OrgMembership(user_id=user.id, organization_id=org.id, role=role)
        session.add(membership)
        await session.commit()
        return membership

    return _make


@pytest.fixture
def make_booking(session):
    async def _make(
        user: User,
        room: Room,
        *,
        date: Optional[dt.date] = None,
        start_time: str = "10:00",
        duration: int = 60,
        status: str = "confirmed",
        visibility: str = "private",
        max_participants: int = 1,
        organization: Optional[Organization] = None,
        title: Optional[str] = None,
    ) -> Booking:
        booking = Booking(
            user_id=user.id,
            room_id=room.id,
            organization_id=organization.id if organization else None,
            date=date or future_date(),
            start_time=start_time,
            duration=duration,
            status=status,
            visibility=visibility,
            max_participants=max_participants,
            title=title,
        )
        session.add(booking)
        await session.commit()
        return booking

    return _make


@pytest.fixture
def add_participant(session):
    async def _add(booking: Booking, user: User) -> BookingParticipant:
        participant = BookingParticipant(booking_id=booking.id, user_id=user.id)
        session.add(participant)
        await session.commit()
        return participant

    return _add
