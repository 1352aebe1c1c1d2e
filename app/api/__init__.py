"""
API Router

Everything is mounted under /api; /api/v2 carries the participation and
availability endpoints.
"""

from fastapi import APIRouter

from . import auth, bookings, issues, organizations, rooms, user, users
from .v2 import router as v2_router

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
router.include_router(user.router, prefix="/user", tags=["User"])
router.include_router(organizations.router, prefix="/organizations", tags=["Organizations"])
router.include_router(rooms.router, prefix="/rooms", tags=["Rooms"])
router.include_router(issues.router, prefix="/issues", tags=["Issues"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(v2_router, prefix="/v2")
