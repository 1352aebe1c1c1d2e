"""Room data access."""

from __future__ import annotations

import uuid
from typing import Optional, Sequence

from sqlalchemy import func
from sqlmodel import select

from app.models.booking import Booking
from app.models.room import Room

from .base import BaseRepository


class RoomRepository(BaseRepository[Room]):
    model = Room

    async def get_by_name(self, name: str) -> Optional[Room]:
        result = await self.session.execute(select(Room).where(Room.name == name))
        return result.scalar_one_or_none()

    async def get_many(self, room_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, Room]:
        if not room_ids:
            return {}
        result = await self.session.execute(select(Room).where(Room.id.in_(set(room_ids))))
        return {room.id: room for room in result.scalars().all()}

    async def list(self, category: Optional[str] = None, *, for_update: bool = False) -> list[Room]:
        """Rooms in pick order (name, then id).

        ``for_update`` locks the selected rows until the transaction ends.
        """
        query = select(Room)
        if category:
            query = query.where(Room.category == category)
        query = query.order_by(Room.name, Room.id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_by_category(self) -> dict[str, int]:
        result = await self.session.execute(
            select(Room.category, func.count(Room.id)).group_by(Room.category)
        )
        return {category: count for category, count in result.all()}

    async def has_bookings(self, room_id: uuid.UUID) -> bool:
        result = await self.session.execute(
            select(func.count(Booking.id)).where(Booking.room_id == room_id)
        )
        return result.scalar_one() > 0
