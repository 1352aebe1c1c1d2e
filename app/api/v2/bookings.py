"""
Booking participation endpoints (mounted under /api/v2/bookings).

GET    /public              - Joinable bookings (?date=)
POST   /{booking_id}/join   - Join a public or org booking
DELETE /{booking_id}/join   - Leave a booking
"""

from __future__ import annotations

import datetime as dt
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_booking_service
from app.core.auth import get_current_user
from app.models.user import User
from app.services.bookings import BookingService

from roombook_shared.schemas.bookings import BookingResponse, PublicBookingListResponse

router = APIRouter()


@router.get("/public", response_model=PublicBookingListResponse)
async def list_public_bookings(
    date: Optional[dt.date] = Query(None),
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Public bookings plus org bookings of the caller's organizations."""
    items = await service.list_public_bookings(user.id, on_date=date)
    return PublicBookingListResponse(data=items)


@router.post("/{booking_id}/join", response_model=BookingResponse)
async def join_booking(
    booking_id: uuid.UUID,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return await service.join_booking(booking_id, user.id)


@router.delete("/{booking_id}/join", response_model=BookingResponse)
async def leave_booking(
    booking_id: uuid.UUID,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return await service.leave_booking(booking_id, user.id)
