"""
API v2 Router

Booking participation, per-room availability and the category schedule.
The v1 booking and user-booking routes are mounted here unchanged.
"""

from fastapi import APIRouter

from app.api import bookings as v1_bookings
from app.api import user as v1_user
from app.api.v2 import bookings as v2_bookings
from app.api.v2 import rooms
from roombook_shared.schemas.bookings import BookingListResponse

router = APIRouter()

# /public must be matched before /{booking_id}
router.include_router(v2_bookings.router, prefix="/bookings", tags=["Bookings"])
router.include_router(v1_bookings.router, prefix="/bookings", tags=["Bookings"])
router.include_router(rooms.router, tags=["Rooms"])
router.add_api_route(
    "/user/bookings",
    v1_user.list_my_bookings,
    methods=["GET"],
    response_model=BookingListResponse,
    tags=["User"],
)
