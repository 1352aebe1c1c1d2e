"""Service wiring for route handlers."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_session
from app.repositories.bookings import BookingRepository
from app.repositories.organizations import MembershipRepository, OrganizationRepository
from app.repositories.rooms import RoomRepository
from app.repositories.users import UserRepository
from app.services.authorization import AuthorizationService
from app.services.bookings import BookingService


def build_authorization_service(session: AsyncSession) -> AuthorizationService:
    return AuthorizationService(UserRepository(session), MembershipRepository(session))


def build_booking_service(session: AsyncSession) -> BookingService:
    return BookingService(
        bookings=BookingRepository(session),
        rooms=RoomRepository(session),
        users=UserRepository(session),
        organizations=OrganizationRepository(session),
        authz=build_authorization_service(session),
        settings=get_settings(),
    )


async def get_booking_service(
    session: AsyncSession = Depends(get_session),
) -> BookingService:
    return build_booking_service(session)
