"""
Booking service: creation, status changes, and the participant lifecycle.

Room picks happen inside the request transaction: the candidate rooms of a
category are locked before the conflict check, so concurrent creations for
the same category serialize on databases that honour row locks.
"""

from __future__ import annotations

import datetime as dt
import uuid
from typing import Optional

import structlog

from app.core.config import Settings
from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from app.models.booking import Booking
from app.models.room import Room
from app.repositories.bookings import BookingRepository
from app.repositories.organizations import OrganizationRepository
from app.repositories.rooms import RoomRepository
from app.repositories.users import UserRepository
from app.services import scheduling
from app.services.authorization import AuthorizationService

from roombook_shared.schemas.bookings import (
    BookingCreateRequest,
    BookingParticipantResponse,
    BookingResponse,
    BookingRoom,
    PublicBookingResponse,
)
from roombook_shared.schemas.common import (
    ACTIVE_BOOKING_STATUSES,
    BookingStatus,
    BookingVisibility,
)

log = structlog.get_logger()

ACTIVE_STATUSES = [status.value for status in ACTIVE_BOOKING_STATUSES]


class BookingService:
    def __init__(
        self,
        bookings: BookingRepository,
        rooms: RoomRepository,
        users: UserRepository,
        organizations: OrganizationRepository,
        authz: AuthorizationService,
        settings: Settings,
    ) -> None:
        self.bookings = bookings
        self.rooms = rooms
        self.users = users
        self.organizations = organizations
        self.authz = authz
        self.settings = settings

    # -----------------------------------------------------------------------
    # Creation
    # -----------------------------------------------------------------------

    async def create_booking(
        self, user_id: uuid.UUID, req: BookingCreateRequest
    ) -> BookingResponse:
        """Pick a free room of the requested category and book it."""
        self._check_time_window(req.start_time, req.duration)

        user = await self.authz.get_user(user_id)
        limit = self.authz.role_duration_limit(user.role)
        if limit is not None and req.duration > limit:
            raise ValidationError(
                f"Your role allows maximum {limit} minutes per booking", field="duration"
            )

        if req.organization_id is not None:
            org = await self.organizations.get(req.organization_id)
            if not org:
                raise NotFoundError("Organization not found")
        elif req.visibility == BookingVisibility.ORG:
            raise ValidationError(
                "Organization bookings require an organization", field="organizationId"
            )

        if req.visibility != BookingVisibility.PRIVATE and not req.title:
            raise ValidationError("Title is required for shared bookings", field="title")

        room = await self._pick_room(req)

        status = BookingStatus.PENDING if req.organization_id else BookingStatus.CONFIRMED
        booking = await self.bookings.create(
            user_id=user.id,
            room_id=room.id,
            organization_id=req.organization_id,
            date=req.date,
            start_time=req.start_time,
            duration=req.duration,
            status=status.value,
            visibility=req.visibility.value,
            max_participants=req.max_participants,
            title=req.title,
            description=req.description,
        )
        log.info(
            "booking.created",
            booking_id=str(booking.id),
            user_id=str(user.id),
            room=room.name,
            date=req.date.isoformat(),
            start_time=req.start_time,
            duration=req.duration,
            status=booking.status,
        )
        return (await self._present([booking]))[0]

    def _check_time_window(self, start_time: str, duration: int) -> None:
        if scheduling.to_minutes(start_time) % self.settings.slot_minutes:
            raise ValidationError(
                f"Start time must be on a {self.settings.slot_minutes}-minute boundary",
                field="startTime",
            )
        open_hour = self.settings.booking_open_hour
        close_hour = self.settings.booking_close_hour
        if not scheduling.within_hours(start_time, duration, open_hour, close_hour):
            raise ValidationError(
                f"Bookings must be between {open_hour:02d}:00 and {close_hour:02d}:00",
                field="startTime",
            )

    async def _pick_room(self, req: BookingCreateRequest) -> Room:
        """First room of the category (name order) free for the whole window."""
        rooms = await self.rooms.list(req.category.value, for_update=True)
        taken = await self.bookings.list_for_rooms(
            [room.id for room in rooms], req.date, ACTIVE_STATUSES
        )
        busy: dict[uuid.UUID, list[tuple[str, int]]] = {room.id: [] for room in rooms}
        for booking in taken:
            busy[booking.room_id].append((booking.start_time, booking.duration))

        free = [
            room
            for room in rooms
            if not scheduling.conflicts(req.start_time, req.duration, busy[room.id])
        ]
        if not free:
            raise NotFoundError("No rooms available")

        for room in free:
            if req.max_participants <= room.capacity:
                return room
        largest = max(room.capacity for room in free)
        raise ValidationError(
            f"Maximum participants cannot exceed room capacity ({largest})",
            field="maxParticipants",
        )

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    async def get_booking(self, booking_id: uuid.UUID, user_id: uuid.UUID) -> BookingResponse:
        user = await self.authz.get_user(user_id)
        booking = await self._get_or_404(booking_id)
        if not self.authz.can_manage(booking.user_id, user):
            raise ForbiddenError("You do not have access to this booking")
        return (await self._present([booking]))[0]

    async def list_bookings(
        self,
        user_id: uuid.UUID,
        *,
        status: Optional[BookingStatus] = None,
        upcoming: bool = False,
        limit: Optional[int] = None,
        on_date: Optional[dt.date] = None,
    ) -> list[BookingResponse]:
        """All bookings for admins, the caller's own otherwise."""
        user = await self.authz.get_user(user_id)
        owner = None if self.authz.is_admin(user) else user.id
        return await self._list(owner, status, upcoming, limit, on_date)

    async def list_user_bookings(
        self,
        user_id: uuid.UUID,
        *,
        status: Optional[BookingStatus] = None,
        upcoming: bool = False,
    ) -> list[BookingResponse]:
        user = await self.authz.get_user(user_id)
        return await self._list(user.id, status, upcoming, None, None)

    async def _list(
        self,
        owner_id: Optional[uuid.UUID],
        status: Optional[BookingStatus],
        upcoming: bool,
        limit: Optional[int],
        on_date: Optional[dt.date],
    ) -> list[BookingResponse]:
        if upcoming:
            rows = await self.bookings.list(
                user_id=owner_id,
                status=BookingStatus.CONFIRMED.value,
                from_date=dt.date.today(),
                on_date=on_date,
                limit=limit,
                ascending=True,
            )
        else:
            rows = await self.bookings.list(
                user_id=owner_id,
                status=status.value if status else None,
                on_date=on_date,
                limit=limit,
            )
        return await self._present(rows)

    async def list_room_bookings(
        self, room_id: uuid.UUID, on_date: dt.date
    ) -> list[BookingResponse]:
        """Active bookings of one room on one date, in start order."""
        if not await self.rooms.get(room_id):
            raise NotFoundError("Room not found")
        rows = await self.bookings.list_for_rooms([room_id], on_date, ACTIVE_STATUSES)
        return await self._present(rows)

    async def list_public_bookings(
        self, user_id: uuid.UUID, on_date: Optional[dt.date] = None
    ) -> list[PublicBookingResponse]:
        """Active public bookings plus org bookings of the caller's organizations."""
        user = await self.authz.get_user(user_id)
        org_ids = await self.authz.get_membership_org_ids(user.id)
        rows = await self.bookings.list_joinable(
            org_ids, ACTIVE_STATUSES, from_date=dt.date.today(), on_date=on_date
        )
        presented = await self._present(rows)
        creators = await self.users.get_many([booking.user_id for booking in rows])
        now = dt.datetime.now()

        result = []
        for booking, item in zip(rows, presented):
            taken = len(item.participants)
            is_full = taken >= booking.max_participants
            joined = any(p.user_id == user.id for p in item.participants)
            started = scheduling.start_datetime(booking.date, booking.start_time) <= now
            creator = creators.get(booking.user_id)
            result.append(
                PublicBookingResponse(
                    **item.model_dump(),
                    creator_name=creator.name if creator else None,
                    available_slots=max(booking.max_participants - taken, 0),
                    is_full=is_full,
                    can_join=not (is_full or joined or started or booking.user_id == user.id),
                )
            )
        return result

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    async def update_status(
        self, booking_id: uuid.UUID, user_id: uuid.UUID, new_status: BookingStatus
    ) -> BookingResponse:
        """Owner or admin may move a booking to any status."""
        user = await self.authz.get_user(user_id)
        booking = await self._get_or_404(booking_id)
        if not self.authz.can_manage(booking.user_id, user):
            raise ForbiddenError("You can only update your own bookings")

        previous = booking.status
        booking = await self.bookings.update(booking, status=new_status.value)
        log.info(
            "booking.status_changed",
            booking_id=str(booking.id),
            by=str(user.id),
            previous=previous,
            status=booking.status,
        )
        return (await self._present([booking]))[0]

    async def delete_booking(self, booking_id: uuid.UUID, user_id: uuid.UUID) -> None:
        user = await self.authz.get_user(user_id)
        self.authz.require_admin(user)
        booking = await self._get_or_404(booking_id)
        await self.bookings.delete(booking)
        log.info("booking.deleted", booking_id=str(booking_id), by=str(user.id))

    async def join_booking(self, booking_id: uuid.UUID, user_id: uuid.UUID) -> BookingResponse:
        booking = await self._get_or_404(booking_id)
        user = await self.authz.get_user(user_id)

        if booking.visibility == BookingVisibility.PRIVATE.value:
            raise ForbiddenError("This is a private booking")
        if booking.user_id == user.id:
            raise ForbiddenError("You are the creator of this booking")
        if await self.bookings.get_participant(booking.id, user.id):
            raise ValidationError("Already joined this booking")
        if booking.status not in ACTIVE_STATUSES:
            raise ValidationError("Booking is no longer active")
        if await self.bookings.participant_count(booking.id) >= booking.max_participants:
            raise ValidationError("Booking is full")
        if (
            booking.visibility == BookingVisibility.ORG.value
            and booking.organization_id is not None
            and not await self.authz.is_member(user.id, booking.organization_id)
        ):
            raise ForbiddenError("Not a member of this organization")
        if scheduling.start_datetime(booking.date, booking.start_time) < dt.datetime.now():
            raise ValidationError("Booking has already started")

        await self.bookings.add_participant(booking.id, user.id)
        log.info("booking.joined", booking_id=str(booking.id), user_id=str(user.id))
        return (await self._present([booking]))[0]

    async def leave_booking(self, booking_id: uuid.UUID, user_id: uuid.UUID) -> BookingResponse:
        booking = await self._get_or_404(booking_id)
        if booking.user_id == user_id:
            raise ForbiddenError("Cannot leave your own booking. Cancel it instead.")
        participant = await self.bookings.get_participant(booking.id, user_id)
        if not participant:
            raise ValidationError("Not a participant of this booking")

        await self.bookings.remove_participant(participant)
        log.info("booking.left", booking_id=str(booking.id), user_id=str(user_id))
        return (await self._present([booking]))[0]

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    async def _get_or_404(self, booking_id: uuid.UUID) -> Booking:
        booking = await self.bookings.get(booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    async def _present(self, rows: list[Booking]) -> list[BookingResponse]:
        """Join bookings with their room and participant list."""
        rooms = await self.rooms.get_many([booking.room_id for booking in rows])
        participants = await self.bookings.participants_for([booking.id for booking in rows])
        people = await self.users.get_many(
            [p.user_id for group in participants.values() for p in group]
        )

        result = []
        for booking in rows:
            room = rooms.get(booking.room_id)
            members = []
            for p in participants.get(booking.id, []):
                person = people.get(p.user_id)
                members.append(
                    BookingParticipantResponse(
                        user_id=p.user_id,
                        name=person.name if person else None,
                        email=person.email if person else None,
                        role=p.role,
                        joined_at=p.joined_at,
                    )
                )
            result.append(
                BookingResponse(
                    **booking.model_dump(),
                    room=BookingRoom.model_validate(room) if room else None,
                    participants=members,
                )
            )
        return result
