"""Reported issue model."""

from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Issue(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "issues"

    user_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", index=True)
    email: Optional[str] = None
    issue_type: str = Field(nullable=False)
    description: str = Field(nullable=False)
    booking_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("bookings.id", ondelete="SET NULL")),
    )
    room_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("rooms.id", ondelete="SET NULL")),
    )
    status: str = Field(nullable=False, default="open")  # open | in_progress | resolved
