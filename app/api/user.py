"""
Endpoints about the signed-in user (mounted under /api/user).

GET /bookings       - The caller's bookings (?status=, ?upcoming=true)
GET /organizations  - The caller's organizations with their role
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_booking_service
from app.core.auth import get_current_user
from app.core.database import get_session
from app.models.user import User
from app.services import organizations as org_service
from app.services.bookings import BookingService

from roombook_shared.schemas.bookings import BookingListResponse
from roombook_shared.schemas.common import BookingStatus
from roombook_shared.schemas.organizations import UserOrgListResponse

router = APIRouter()


@router.get("/bookings", response_model=BookingListResponse)
async def list_my_bookings(
    status: Optional[BookingStatus] = Query(None),
    upcoming: bool = Query(False),
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Upcoming lists confirmed bookings from today on, soonest first."""
    items = await service.list_user_bookings(user.id, status=status, upcoming=upcoming)
    return BookingListResponse(data=items)


@router.get("/organizations", response_model=UserOrgListResponse)
async def list_my_organizations(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    items = await org_service.list_user_organizations(user.id, session)
    return UserOrgListResponse(data=items)
