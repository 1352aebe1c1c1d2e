"""Room, availability and schedule schemas."""

from __future__ import annotations

import datetime as dt
import uuid
from typing import Optional

from pydantic import Field

from .common import CamelModel, RoomCategory


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class RoomCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    category: RoomCategory
    capacity: int = Field(ge=1, le=50)
    description: Optional[str] = Field(default=None, max_length=500)


class RoomUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[RoomCategory] = None
    capacity: Optional[int] = Field(default=None, ge=1, le=50)
    description: Optional[str] = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class RoomResponse(CamelModel):
    id: uuid.UUID
    name: str
    category: RoomCategory
    capacity: int
    description: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime


class RoomListResponse(CamelModel):
    data: list[RoomResponse]


class RoomCategoryInfo(CamelModel):
    category: RoomCategory
    name: str
    capacity: str  # display text, e.g. "1-4 people"
    description: str
    count: int


class RoomCategoryListResponse(CamelModel):
    data: list[RoomCategoryInfo]


class TimeRange(CamelModel):
    start_time: str
    end_time: str


class RoomAvailabilityResponse(CamelModel):
    room_id: uuid.UUID
    date: dt.date
    duration: int
    available_slots: list[str]
    booked: list[TimeRange]


class ScheduleSlot(CamelModel):
    start_time: str
    available_rooms: int


class ScheduleStats(CamelModel):
    total_rooms: int
    total_bookings: int
    booked_minutes: int
    capacity_minutes: int
    utilization: float  # percent of bookable minutes in use


class ScheduleResponse(CamelModel):
    date: dt.date
    category: RoomCategory
    duration: int
    slots: list[ScheduleSlot]
    stats: ScheduleStats
