"""Room model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Room(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "rooms"

    name: str = Field(unique=True, nullable=False, index=True)
    category: str = Field(nullable=False, index=True)  # small | large
    capacity: int = Field(nullable=False)
    description: Optional[str] = None
