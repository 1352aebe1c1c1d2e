"""Booking and participant data access."""

from __future__ import annotations

import datetime as dt
import uuid
from collections import defaultdict
from typing import Iterable, Optional, Sequence

from sqlalchemy import and_, delete, func, or_
from sqlmodel import select

from app.models.booking import Booking, BookingParticipant

from .base import BaseRepository


class BookingRepository(BaseRepository[Booking]):
    model = Booking

    async def list(
        self,
        *,
        user_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
        statuses: Optional[Iterable[str]] = None,
        on_date: Optional[dt.date] = None,
        from_date: Optional[dt.date] = None,
        limit: Optional[int] = None,
        ascending: bool = False,
    ) -> list[Booking]:
        query = select(Booking)
        if user_id is not None:
            query = query.where(Booking.user_id == user_id)
        if status is not None:
            query = query.where(Booking.status == status)
        if statuses is not None:
            query = query.where(Booking.status.in_(list(statuses)))
        if on_date is not None:
            query = query.where(Booking.date == on_date)
        if from_date is not None:
            query = query.where(Booking.date >= from_date)
        if ascending:
            query = query.order_by(Booking.date, Booking.start_time)
        else:
            query = query.order_by(Booking.date.desc(), Booking.start_time.desc())
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_for_rooms(
        self,
        room_ids: Sequence[uuid.UUID],
        on_date: dt.date,
        statuses: Optional[Iterable[str]] = None,
    ) -> list[Booking]:
        """Bookings of the given rooms on one date, in start order."""
        if not room_ids:
            return []
        query = select(Booking).where(
            Booking.room_id.in_(list(room_ids)),
            Booking.date == on_date,
        )
        if statuses is not None:
            query = query.where(Booking.status.in_(list(statuses)))
        result = await self.session.execute(query.order_by(Booking.start_time))
        return list(result.scalars().all())

    async def list_joinable(
        self,
        organization_ids: Sequence[uuid.UUID],
        statuses: Iterable[str],
        from_date: dt.date,
        on_date: Optional[dt.date] = None,
    ) -> list[Booking]:
        """Public bookings plus org bookings of the given organizations."""
        visible = Booking.visibility == "public"
        if organization_ids:
            visible = or_(
                visible,
                and_(
                    Booking.visibility == "org",
                    Booking.organization_id.in_(list(organization_ids)),
                ),
            )
        query = select(Booking).where(visible, Booking.status.in_(list(statuses)))
        if on_date is not None:
            query = query.where(Booking.date == on_date)
        else:
            query = query.where(Booking.date >= from_date)
        result = await self.session.execute(query.order_by(Booking.date, Booking.start_time))
        return list(result.scalars().all())

    async def delete(self, entity: Booking) -> None:
        await self.session.execute(
            delete(BookingParticipant).where(BookingParticipant.booking_id == entity.id)
        )
        await super().delete(entity)

    # -----------------------------------------------------------------------
    # Participants
    # -----------------------------------------------------------------------

    async def participants_for(
        self, booking_ids: Sequence[uuid.UUID]
    ) -> dict[uuid.UUID, list[BookingParticipant]]:
        grouped: dict[uuid.UUID, list[BookingParticipant]] = defaultdict(list)
        if not booking_ids:
            return grouped
        result = await self.session.execute(
            select(BookingParticipant)
            .where(BookingParticipant.booking_id.in_(list(booking_ids)))
            .order_by(BookingParticipant.joined_at)
        )
        for participant in result.scalars().all():
            grouped[participant.booking_id].append(participant)
        return grouped

    async def participant_count(self, booking_id: uuid.UUID) -> int:
        result = await self.session.execute(
            select(func.count(BookingParticipant.id)).where(
                BookingParticipant.booking_id == booking_id
            )
        )
        return result.scalar_one()

    async def get_participant(
        self, booking_id: uuid.UUID, user_id: uuid.UUID
    ) -> Optional[BookingParticipant]:
        result = await self.session.execute(
            select(BookingParticipant).where(
                BookingParticipant.booking_id == booking_id,
                BookingParticipant.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_participant(
        self, booking_id: uuid.UUID, user_id: uuid.UUID
    ) -> BookingParticipant:
        participant = BookingParticipant(booking_id=booking_id, user_id=user_id)
        self.session.add(participant)
        await self.session.flush()
        return participant

    async def remove_participant(self, participant: BookingParticipant) -> None:
        await self.session.delete(participant)
        await self.session.flush()
