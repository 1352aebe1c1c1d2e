"""
Room service: room catalogue, per-room availability and category schedules.
"""

from __future__ import annotations

import datetime as dt
import uuid
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.room import Room
from app.repositories.bookings import BookingRepository
from app.repositories.rooms import RoomRepository
from app.services import scheduling

from roombook_shared.schemas.common import ACTIVE_BOOKING_STATUSES, RoomCategory
from roombook_shared.schemas.rooms import (
    RoomAvailabilityResponse,
    RoomCategoryInfo,
    RoomCreateRequest,
    RoomUpdateRequest,
    ScheduleResponse,
    ScheduleSlot,
    ScheduleStats,
    TimeRange,
)

log = structlog.get_logger()

ACTIVE_STATUSES = [status.value for status in ACTIVE_BOOKING_STATUSES]

DUPLICATE_ROOM_NAME = "A room with this name already exists"

CATEGORY_INFO: dict[RoomCategory, dict[str, str]] = {
    RoomCategory.SMALL: {
        "name": "Small Room",
        "capacity": "1-4 people",
        "description": "Perfect for individual or small group study",
    },
    RoomCategory.LARGE: {
        "name": "Large Room",
        "capacity": "5-12 people",
        "description": "Ideal for group projects and team meetings",
    },
}


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

async def list_rooms(session: AsyncSession, category: Optional[RoomCategory] = None) -> list[Room]:
    return await RoomRepository(session).list(category.value if category else None)


async def get_room(room_id: uuid.UUID, session: AsyncSession) -> Room:
    room = await RoomRepository(session).get(room_id)
    if not room:
        raise NotFoundError("Room not found")
    return room


async def create_room(req: RoomCreateRequest, session: AsyncSession) -> Room:
    rooms = RoomRepository(session)
    if await rooms.get_by_name(req.name):
        raise ConflictError(DUPLICATE_ROOM_NAME)
    try:
        room = await rooms.create(
            name=req.name,
            category=req.category.value,
            capacity=req.capacity,
            description=req.description,
        )
    except IntegrityError:
        raise ConflictError(DUPLICATE_ROOM_NAME)
    log.info("room.created", room_id=str(room.id), name=room.name, category=room.category)
    return room


async def update_room(room_id: uuid.UUID, req: RoomUpdateRequest, session: AsyncSession) -> Room:
    rooms = RoomRepository(session)
    room = await get_room(room_id, session)
    changes = {
        key: value
        for key, value in req.model_dump(exclude_unset=True).items()
        if value is not None or key == "description"
    }
    if "category" in changes:
        changes["category"] = RoomCategory(changes["category"]).value
    if changes.get("name") and changes["name"] != room.name:
        if await rooms.get_by_name(changes["name"]):
            raise ConflictError(DUPLICATE_ROOM_NAME)
    if not changes:
        return room
    try:
        room = await rooms.update(room, **changes)
    except IntegrityError:
        raise ConflictError(DUPLICATE_ROOM_NAME)
    log.info("room.updated", room_id=str(room.id), fields=sorted(changes))
    return room


async def delete_room(room_id: uuid.UUID, session: AsyncSession) -> None:
    rooms = RoomRepository(session)
    room = await get_room(room_id, session)
    if await rooms.has_bookings(room.id):
        raise ConflictError("Room has bookings and cannot be deleted")
    await rooms.delete(room)
    log.info("room.deleted", room_id=str(room_id))


async def room_categories(session: AsyncSession) -> list[RoomCategoryInfo]:
    """Room counts per category with display text."""
    counts = await RoomRepository(session).count_by_category()
    return [
        RoomCategoryInfo(category=category, count=counts.get(category.value, 0), **info)
        for category, info in CATEGORY_INFO.items()
    ]


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------

def _check_duration(duration: int) -> None:
    step = get_settings().slot_minutes
    if duration < step or duration % step:
        raise ValidationError(
            f"Duration must be a positive multiple of {step} minutes", field="duration"
        )


async def room_availability(
    room_id: uuid.UUID, on_date: dt.date, duration: int, session: AsyncSession
) -> RoomAvailabilityResponse:
    """Start times at which ``room_id`` is free for ``duration`` minutes."""
    settings = get_settings()
    _check_duration(duration)
    room = await get_room(room_id, session)
    taken = await BookingRepository(session).list_for_rooms([room.id], on_date, ACTIVE_STATUSES)
    busy = [(b.start_time, b.duration) for b in taken]

    return RoomAvailabilityResponse(
        room_id=room.id,
        date=on_date,
        duration=duration,
        available_slots=scheduling.free_starts(
            busy,
            duration,
            settings.booking_open_hour,
            settings.booking_close_hour,
            settings.slot_minutes,
        ),
        booked=[
            TimeRange(start_time=start, end_time=scheduling.end_time(start, length))
            for start, length in busy
        ],
    )


async def category_schedule(
    on_date: dt.date, category: RoomCategory, duration: int, session: AsyncSession
) -> ScheduleResponse:
    """Slots where at least one room of ``category`` is free, with utilisation."""
    settings = get_settings()
    _check_duration(duration)
    rooms = await RoomRepository(session).list(category.value)
    taken = await BookingRepository(session).list_for_rooms(
        [room.id for room in rooms], on_date, ACTIVE_STATUSES
    )
    busy: dict[uuid.UUID, list[tuple[str, int]]] = {room.id: [] for room in rooms}
    for booking in taken:
        busy[booking.room_id].append((booking.start_time, booking.duration))

    slots = []
    starts = scheduling.candidate_starts(
        duration, settings.booking_open_hour, settings.booking_close_hour, settings.slot_minutes
    )
    for start in starts:
        free = sum(
            1 for room in rooms if not scheduling.conflicts(start, duration, busy[room.id])
        )
        if free:
            slots.append(ScheduleSlot(start_time=start, available_rooms=free))

    open_minutes = (settings.booking_close_hour - settings.booking_open_hour) * 60
    capacity_minutes = open_minutes * len(rooms)
    booked_minutes = sum(booking.duration for booking in taken)
    utilization = round(booked_minutes / capacity_minutes * 100, 1) if capacity_minutes else 0.0

    return ScheduleResponse(
        date=on_date,
        category=category,
        duration=duration,
        slots=slots,
        stats=ScheduleStats(
            total_rooms=len(rooms),
            total_bookings=len(taken),
            booked_minutes=booked_minutes,
            capacity_minutes=capacity_minutes,
            utilization=utilization,
        ),
    )
