"""
Room API endpoints (mounted under /api/rooms).

GET    /            - List rooms (?category=)
POST   /            - Create a room (admin)
GET    /categories  - Room counts per category
GET    /{room_id}   - Room details
PATCH  /{room_id}   - Update a room (admin)
DELETE /{room_id}   - Delete a room without bookings (admin)
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user, require_admin
from app.core.database import get_session
from app.models.user import User
from app.services import rooms as room_service

from roombook_shared.schemas.common import RoomCategory
from roombook_shared.schemas.rooms import (
    RoomCategoryListResponse,
    RoomCreateRequest,
    RoomListResponse,
    RoomResponse,
    RoomUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=RoomListResponse)
async def list_rooms(
    category: Optional[RoomCategory] = Query(None),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    rooms = await room_service.list_rooms(session, category)
    return RoomListResponse(data=[RoomResponse.model_validate(room) for room in rooms])


@router.post("", response_model=RoomResponse, status_code=201)
async def create_room(
    body: RoomCreateRequest,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    room = await room_service.create_room(body, session)
    return RoomResponse.model_validate(room)


@router.get("/categories", response_model=RoomCategoryListResponse)
async def list_categories(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return RoomCategoryListResponse(data=await room_service.room_categories(session))


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room(
    room_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    room = await room_service.get_room(room_id, session)
    return RoomResponse.model_validate(room)


@router.patch("/{room_id}", response_model=RoomResponse)
async def update_room(
    room_id: uuid.UUID,
    body: RoomUpdateRequest,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    room = await room_service.update_room(room_id, body, session)
    return RoomResponse.model_validate(room)


@router.delete("/{room_id}")
async def delete_room(
    room_id: uuid.UUID,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    await room_service.delete_room(room_id, session)
    return {"success": True}
