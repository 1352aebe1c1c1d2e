"""
Booking API endpoints (mounted under /api/bookings and /api/v2/bookings).

GET    /              - Admins: all bookings; others: their own
POST   /              - Create a booking in the first free room of a category
GET    /{booking_id}  - Booking details (owner or admin)
PATCH  /{booking_id}  - Change status (owner or admin)
DELETE /{booking_id}  - Delete (admin)
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

from roombook_shared.schemas.bookings import (
    BookingCreateRequest,
    BookingDeleteResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdateRequest,
)
from roombook_shared.schemas.common import BookingStatus

router = APIRouter()


@router.get("", response_model=BookingListResponse)
async def list_bookings(
    status: Optional[BookingStatus] = Query(None),
    upcoming: bool = Query(False),
    limit: Optional[int] = Query(None, ge=1, le=500),
    date: Optional[dt.date] = Query(None),
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    items = await service.list_bookings(
        user.id, status=status, upcoming=upcoming, limit=limit, on_date=date
    )
    return BookingListResponse(data=items)


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    body: BookingCreateRequest,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Book the first free room of the requested category."""
    return await service.create_booking(user.id, body)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: uuid.UUID,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return await service.get_booking(booking_id, user.id)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def update_booking_status(
    booking_id: uuid.UUID,
    body: BookingStatusUpdateRequest,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return await service.update_status(booking_id, user.id, body.status)


@router.delete("/{booking_id}", response_model=BookingDeleteResponse)
async def delete_booking(
    booking_id: uuid.UUID,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    await service.delete_booking(booking_id, user.id)
    return BookingDeleteResponse(success=True)
