"""
BookingService tests against an in-memory database.

Covers:
- Role duration limits
- Room picking and overlap rules
- Initial status (personal vs organization)
- Validation of shared bookings, capacity and opening hours
- Owner/admin checks on read, status update and delete
- Listing (admin vs own, upcoming)
"""

from __future__ import annotations

import datetime as dt
import uuid

import pytest

from app.api.deps import build_booking_service
from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from roombook_shared.schemas.bookings import BookingCreateRequest
from roombook_shared.schemas.common import BookingStatus


def _future(days: int = 7) -> dt.date:
    return dt.date.today() + dt.timedelta(days=days)


def _request(**overrides) -> BookingCreateRequest:
    fields = {
        "category": "small",
        "date": _future(),
        "start_time": "10:00",
        "duration": 60,
    }
    fields.update(overrides)
    return BookingCreateRequest(**fields)


@pytest.fixture
def service(session):
    return build_booking_service(session)


# ---------------------------------------------------------------------------
# Duration limits
# ---------------------------------------------------------------------------

class TestRoleLimits:
    @pytest.mark.parametrize("duration", [150, 180, 240])
    async def test_user_over_limit_rejected(self, service, make_user, rooms, duration):
        user = await make_user(role="user")
        with pytest.raises(ValidationError) as exc:
            await service.create_booking(user.id, _request(duration=duration))
        assert exc.value.message == "Your role allows maximum 120 minutes per booking"
        assert exc.value.field == "duration"

    async def test_user_at_limit_accepted(self, service, make_user, rooms):
        user = await make_user(role="user")
        booking = await service.create_booking(user.id, _request(duration=120))
        assert booking.duration == 120

    async def test_officer_limit(self, service, make_user, rooms):
        officer = await make_user(role="officer")
        booking = await service.create_booking(officer.id, _request(duration=180))
        assert booking.duration == 180
        with pytest.raises(ValidationError, match="maximum 180 minutes"):
            await service.create_booking(officer.id, _request(duration=210, start_time="14:00"))

    async def test_admin_unlimited(self, service, make_user, rooms):
        admin = await make_user(role="admin")
        booking = await service.create_booking(
            admin.id, _request(start_time="08:00", duration=600)
        )
        assert booking.duration == 600

    async def test_unknown_user(self, service, rooms):
        with pytest.raises(NotFoundError, match="User not found"):
            await service.create_booking(uuid.uuid4(), _request())


# ---------------------------------------------------------------------------
# Room picking
# ---------------------------------------------------------------------------

class TestRoomPicking:
    async def test_first_room_by_name(self, service, make_user, rooms):
        user = await make_user()
        booking = await service.create_booking(user.id, _request())
        assert booking.room.name == "Study Room 101"
        assert booking.room.category == "small"

    async def test_overlap_moves_to_next_room(self, service, make_user, rooms):
        user = await make_user()
        first = await service.create_booking(user.id, _request())
        second = await service.create_booking(user.id, _request(start_time="10:30"))
        assert first.room.name == "Study Room 101"
        assert second.room.name == "Study Room 102"

    async def test_back_to_back_is_not_a_conflict(self, service, make_user, rooms):
        user = await make_user()
        await service.create_booking(user.id, _request(start_time="10:00", duration=60))
        later = await service.create_booking(user.id, _request(start_time="11:00"))
        assert later.room.name == "Study Room 101"

    async def test_no_rooms_available(self, service, make_user, make_booking, rooms):
        user = await make_user()
        small_a, small_b, _ = rooms
        await make_booking(user, small_a, date=_future(), start_time="10:00", duration=120)
        await make_booking(user, small_b, date=_future(), start_time="09:00", duration=120)

        with pytest.raises(NotFoundError, match="No rooms available"):
            await service.create_booking(user.id, _request(start_time="10:30"))

    async def test_no_rooms_in_empty_category(self, service, make_user, make_room):
        await make_room("Study Room 201", "large", 12)
        user = await make_user()
        with pytest.raises(NotFoundError, match="No rooms available"):
            await service.create_booking(user.id, _request(category="small"))

    async def test_other_date_does_not_block(self, service, make_user, make_booking, rooms):
        user = await make_user()
        await make_booking(user, rooms[0], date=_future(8), start_time="10:00")
        booking = await service.create_booking(user.id, _request(date=_future(7)))
        assert booking.room.name == "Study Room 101"

    @pytest.mark.parametrize("status", ["cancelled", "rejected", "completed"])
    async def test_inactive_bookings_free_the_room(
        self, service, make_user, make_booking, rooms, status
    ):
        user = await make_user()
        await make_booking(user, rooms[0], date=_future(), start_time="10:00", status=status)
        booking = await service.create_booking(user.id, _request())
        assert booking.room.name == "Study Room 101"

    async def test_pending_booking_blocks(self, service, make_user, make_booking, rooms):
        user = await make_user()
        await make_booking(user, rooms[0], date=_future(), start_time="10:00", status="pending")
        booking = await service.create_booking(user.id, _request())
        assert booking.room.name == "Study Room 102"

    async def test_capacity_skips_small_rooms(self, service, make_user, make_room):
        await make_room("Study Room 201", "large", 10)
        await make_room("Study Room 202", "large", 12)
        user = await make_user()
        booking = await service.create_booking(
            user.id,
            _request(category="large", max_participants=11, visibility="public", title="Review"),
        )
        assert booking.room.name == "Study Room 202"

    async def test_capacity_exceeded(self, service, make_user, rooms):
        user = await make_user()
        with pytest.raises(ValidationError) as exc:
            await service.create_booking(
                user.id, _request(max_participants=6, visibility="public", title="Study")
            )
        assert exc.value.field == "maxParticipants"
        assert "(4)" in exc.value.message


# ---------------------------------------------------------------------------
# Status and validation
# ---------------------------------------------------------------------------

class TestCreateRules:
    async def test_personal_booking_confirmed(self, service, make_user, rooms):
        user = await make_user()
        booking = await service.create_booking(user.id, _request())
        assert booking.status == BookingStatus.CONFIRMED
        assert booking.participants == []

    async def test_organization_booking_pending(self, service, make_user, make_org, rooms):
        user = await make_user(role="officer")
        org = await make_org()
        booking = await service.create_booking(user.id, _request(organization_id=org.id))
        assert booking.status == BookingStatus.PENDING
        assert booking.organization_id == org.id

    async def test_unknown_organization(self, service, make_user, rooms):
        user = await make_user()
        with pytest.raises(NotFoundError, match="Organization not found"):
            await service.create_booking(user.id, _request(organization_id=uuid.uuid4()))

    async def test_org_visibility_requires_organization(self, service, make_user, rooms):
        user = await make_user()
        with pytest.raises(ValidationError) as exc:
            await service.create_booking(user.id, _request(visibility="org", title="Club"))
        assert exc.value.field == "organizationId"

    async def test_shared_booking_requires_title(self, service, make_user, rooms):
        user = await make_user()
        with pytest.raises(ValidationError) as exc:
            await service.create_booking(user.id, _request(visibility="public", title="   "))
        assert exc.value.field == "title"

    @pytest.mark.parametrize(
        "start_time,duration",
        [("07:30", 60), ("21:30", 60), ("22:00", 30)],
    )
    async def test_outside_opening_hours(self, service, make_user, rooms, start_time, duration):
        user = await make_user()
        with pytest.raises(ValidationError, match="between 08:00 and 22:00"):
            await service.create_booking(
                user.id, _request(start_time=start_time, duration=duration)
            )

    async def test_last_slot_of_the_day(self, service, make_user, rooms):
        user = await make_user()
        booking = await service.create_booking(user.id, _request(start_time="21:00"))
        assert booking.start_time == "21:00"

    async def test_start_must_be_on_the_grid(self, service, make_user, rooms):
        user = await make_user()
        with pytest.raises(ValidationError, match="30-minute boundary"):
            await service.create_booking(user.id, _request(start_time="10:15"))


# ---------------------------------------------------------------------------
# Reads and mutations
# ---------------------------------------------------------------------------

class TestOwnership:
    async def test_owner_can_read(self, service, make_user, make_booking, rooms):
        owner = await make_user()
        booking = await make_booking(owner, rooms[0])
        result = await service.get_booking(booking.id, owner.id)
        assert result.id == booking.id
        assert result.room.name == "Study Room 101"

    async def test_stranger_cannot_read(self, service, make_user, make_booking, rooms):
        owner = await make_user()
        stranger = await make_user()
        booking = await make_booking(owner, rooms[0])
        with pytest.raises(ForbiddenError):
            await service.get_booking(booking.id, stranger.id)

    async def test_admin_can_read(self, service, make_user, make_booking, rooms):
        owner = await make_user()
        admin = await make_user(role="admin")
        booking = await make_booking(owner, rooms[0])
        assert (await service.get_booking(booking.id, admin.id)).id == booking.id

    async def test_missing_booking(self, service, make_user):
        user = await make_user()
        with pytest.raises(NotFoundError, match="Booking not found"):
            await service.get_booking(uuid.uuid4(), user.id)

    async def test_owner_cancels(self, service, make_user, make_booking, rooms):
        owner = await make_user()
        booking = await make_booking(owner, rooms[0])
        result = await service.update_status(booking.id, owner.id, BookingStatus.CANCELLED)
        assert result.status == BookingStatus.CANCELLED

    async def test_any_transition_allowed(self, service, make_user, make_booking, rooms):
        admin = await make_user(role="admin")
        booking = await make_booking(admin, rooms[0], status="cancelled")
        result = await service.update_status(booking.id, admin.id, BookingStatus.CONFIRMED)
        assert result.status == BookingStatus.CONFIRMED

    async def test_stranger_cannot_update(self, service, make_user, make_booking, rooms):
        owner = await make_user()
        stranger = await make_user(role="officer")
        booking = await make_booking(owner, rooms[0])
        with pytest.raises(ForbiddenError):
            await service.update_status(booking.id, stranger.id, BookingStatus.CANCELLED)

    async def test_only_admin_deletes(self, service, make_user, make_booking, rooms):
        owner = await make_user()
        booking = await make_booking(owner, rooms[0])
        with pytest.raises(ForbiddenError, match="Admin access required"):
            await service.delete_booking(booking.id, owner.id)

    async def test_admin_delete_checks_existence_after_role(self, service, make_user):
        admin = await make_user(role="admin")
        with pytest.raises(NotFoundError):
            await service.delete_booking(uuid.uuid4(), admin.id)

    async def test_admin_deletes_with_participants(
        self, service, session, make_user, make_booking, add_participant, rooms
    ):
        owner = await make_user()
        guest = await make_user()
        admin = await make_user(role="admin")
        booking = await make_booking(owner, rooms[0], visibility="public", max_participants=3)
        await add_participant(booking, guest)

        await service.delete_booking(booking.id, admin.id)
        with pytest.raises(NotFoundError):
            await service.get_booking(booking.id, admin.id)


class TestListing:
    async def test_admin_sees_everything(self, service, make_user, make_booking, rooms):
        alice = await make_user()
        bob = await make_user()
        admin = await make_user(role="admin")
        await make_booking(alice, rooms[0])
        await make_booking(bob, rooms[1])

        assert len(await service.list_bookings(admin.id)) == 2
        own = await service.list_bookings(alice.id)
        assert [b.user_id for b in own] == [alice.id]

    async def test_status_filter(self, service, make_user, make_booking, rooms):
        user = await make_user()
        await make_booking(user, rooms[0], status="confirmed")
        await make_booking(user, rooms[1], status="cancelled")
        result = await service.list_user_bookings(user.id, status=BookingStatus.CANCELLED)
        assert [b.status for b in result] == [BookingStatus.CANCELLED]

    async def test_upcoming_is_confirmed_and_ascending(
        self, service, make_user, make_booking, rooms
    ):
        user = await make_user()
        yesterday = dt.date.today() - dt.timedelta(days=1)
        await make_booking(user, rooms[0], date=yesterday)
        await make_booking(user, rooms[0], date=_future(5), status="cancelled")
        late = await make_booking(user, rooms[0], date=_future(9))
        soon = await make_booking(user, rooms[1], date=_future(2))

        result = await service.list_user_bookings(user.id, upcoming=True)
        assert [b.id for b in result] == [soon.id, late.id]

    async def test_default_order_is_newest_date_first(
        self, service, make_user, make_booking, rooms
    ):
        user = await make_user()
        early = await make_booking(user, rooms[0], date=_future(1))
        late = await make_booking(user, rooms[0], date=_future(3))
        result = await service.list_user_bookings(user.id)
        assert [b.id for b in result] == [late.id, early.id]
