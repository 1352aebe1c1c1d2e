"""Booking and participant models."""

import datetime as dt
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin, timestamp_field


class Booking(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "bookings"
    __table_args__ = (sa.Index("ix_bookings_room_date", "room_id", "date"),)

    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    room_id: uuid.UUID = Field(foreign_key="rooms.id", nullable=False)
    organization_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="organizations.id", index=True
    )
    date: dt.date = Field(nullable=False, sa_type=sa.Date)
    start_time: str = Field(nullable=False, max_length=5)  # HH:MM
    duration: int = Field(nullable=False)  # minutes
    status: str = Field(nullable=False, default="confirmed")  # pending | confirmed | cancelled | completed | rejected
    visibility: str = Field(nullable=False, default="private")  # private | public | org
    max_participants: int = Field(nullable=False, default=1)
    title: Optional[str] = None
    description: Optional[str] = None


class BookingParticipant(UUIDMixin, SQLModel, table=True):
    __tablename__ = "booking_participants"
    __table_args__ = (
        sa.UniqueConstraint("booking_id", "user_id", name="uq_booking_participants_booking_user"),
    )

    booking_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid,
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    role: str = Field(nullable=False, default="participant")
    joined_at: dt.datetime = timestamp_field()
