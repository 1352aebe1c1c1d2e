"""
Room availability endpoints (mounted under /api/v2).

GET /rooms/{room_id}/availability  - Free start times (?date=&duration=)
GET /rooms/{room_id}/bookings      - Active bookings of the room (?date=)
GET /schedule                      - Category-wide slots and utilisation
"""

from __future__ import annotations

import datetime as dt
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_booking_service
from app.core.auth import get_current_user
from app.core.database import get_session
from app.models.user import User
from app.services import rooms as room_service
from app.services.bookings import BookingService

from roombook_shared.schemas.bookings import BookingListResponse
from roombook_shared.schemas.common import RoomCategory
from roombook_shared.schemas.rooms import RoomAvailabilityResponse, ScheduleResponse

router = APIRouter()


@router.get("/rooms/{room_id}/availability", response_model=RoomAvailabilityResponse)
async def room_availability(
    room_id: uuid.UUID,
    date: dt.date = Query(...),
    duration: int = Query(60),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await room_service.room_availability(room_id, date, duration, session)


@router.get("/rooms/{room_id}/bookings", response_model=BookingListResponse)
async def room_bookings(
    room_id: uuid.UUID,
    date: dt.date = Query(...),
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    items = await service.list_room_bookings(room_id, date)
    return BookingListResponse(data=items)


@router.get("/schedule", response_model=ScheduleResponse)
async def category_schedule(
    date: dt.date = Query(...),
    category: RoomCategory = Query(...),
    duration: int = Query(60),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await room_service.category_schedule(date, category, duration, session)
