"""
User administration endpoints (mounted under /api/users, admin only).

GET   /           - List users (?role=)
PATCH /{user_id}  - Change a user's system role
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_admin
from app.core.database import get_session
from app.models.user import User
from app.services import users as user_service

from roombook_shared.schemas.common import UserRole
from roombook_shared.schemas.users import UserListResponse, UserResponse, UserRoleUpdateRequest

router = APIRouter()


@router.get("", response_model=UserListResponse)
async def list_users(
    role: Optional[UserRole] = Query(None),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    users = await user_service.list_users(session, role)
    return UserListResponse(data=[UserResponse.model_validate(u) for u in users])


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user_role(
    user_id: uuid.UUID,
    body: UserRoleUpdateRequest,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    user = await user_service.change_role(user_id, body.role, admin, session)
    return UserResponse.model_validate(user)
