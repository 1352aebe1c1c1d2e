"""Issue intake service."""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.models.issue import Issue
from app.models.user import User
from app.repositories.bookings import BookingRepository
from app.repositories.issues import IssueRepository
from app.repositories.rooms import RoomRepository

from roombook_shared.schemas.common import IssueStatus
from roombook_shared.schemas.issues import IssueCreateRequest

log = structlog.get_logger()


async def submit_issue(
    req: IssueCreateRequest, user: Optional[User], session: AsyncSession
) -> Issue:
    """Store an issue report; signed-in reporters are linked to their account."""
    if req.booking_id and not await BookingRepository(session).get(req.booking_id):
        raise NotFoundError("Booking not found")
    if req.room_id and not await RoomRepository(session).get(req.room_id):
        raise NotFoundError("Room not found")

    issue = await IssueRepository(session).create(
        user_id=user.id if user else None,
        email=req.email or (user.email if user else None),
        issue_type=req.issue_type,
        description=req.description,
        booking_id=req.booking_id,
        room_id=req.room_id,
        status=IssueStatus.OPEN.value,
    )
    log.info(
        "issue.submitted",
        issue_id=str(issue.id),
        issue_type=issue.issue_type,
        anonymous=user is None,
    )
    return issue


async def list_issues(
    session: AsyncSession, status: Optional[IssueStatus] = None
) -> list[Issue]:
    return await IssueRepository(session).list(status.value if status else None)
