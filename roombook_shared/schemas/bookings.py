"""
Booking schemas shared between the server and its clients.

Covers: booking creation and status updates, booking responses with their
room and participants, and the joinable-booking listing.
"""

from __future__ import annotations

import datetime as dt
import re
import uuid
from typing import Optional

from pydantic import Field, field_validator

from .common import BookingStatus, BookingVisibility, CamelModel, RoomCategory

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

MIN_DURATION_MINUTES = 30
DURATION_STEP_MINUTES = 30


def parse_date(value: object) -> dt.date:
    """Accept ``YYYY-MM-DD`` strings (or dates) only."""
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValueError("Date must be in YYYY-MM-DD format")
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise ValueError("Date must be a valid calendar date")


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class BookingCreateRequest(CamelModel):
    category: RoomCategory
    date: dt.date
    start_time: str
    duration: int
    organization_id: Optional[uuid.UUID] = None
    visibility: BookingVisibility = BookingVisibility.PRIVATE
    max_participants: int = Field(default=1, ge=1, le=50)
    title: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value: object) -> dt.date:
        return parse_date(value)

    @field_validator("start_time")
    @classmethod
    def _check_start_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Start time must be in HH:MM format")
        return value

    @field_validator("duration")
    @classmethod
    def _check_duration(cls, value: int) -> int:
        if value < MIN_DURATION_MINUTES:
            raise ValueError("Minimum booking duration is 30 minutes")
        if value % DURATION_STEP_MINUTES:
            raise ValueError("Duration must be in 30-minute increments")
        return value

    @field_validator("title", "description")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None


class BookingStatusUpdateRequest(CamelModel):
    status: BookingStatus


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class BookingRoom(CamelModel):
    id: uuid.UUID
    name: str
    category: RoomCategory
    capacity: int


class BookingParticipantResponse(CamelModel):
    user_id: uuid.UUID
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = "participant"
    joined_at: dt.datetime


class BookingResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    room_id: uuid.UUID
    organization_id: Optional[uuid.UUID] = None
    date: dt.date
    start_time: str
    duration: int
    status: BookingStatus
    visibility: BookingVisibility
    max_participants: int
    title: Optional[str] = None
    description: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime
    room: Optional[BookingRoom] = None
    participants: list[BookingParticipantResponse] = []


class PublicBookingResponse(BookingResponse):
    """A joinable booking as seen by a prospective participant."""

    creator_name: Optional[str] = None
    available_slots: int
    is_full: bool
    can_join: bool


class BookingListResponse(CamelModel):
    data: list[BookingResponse]


class PublicBookingListResponse(CamelModel):
    data: list[PublicBookingResponse]


class BookingDeleteResponse(CamelModel):
    success: bool = True
