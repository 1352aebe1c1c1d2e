"""User data access."""

from __future__ import annotations

import uuid
from typing import Optional, Sequence

from sqlalchemy import func
from sqlmodel import select

from app.models.user import User

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_many(self, user_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, User]:
        if not user_ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(set(user_ids))))
        return {user.id: user for user in result.scalars().all()}

    async def list(self, role: Optional[str] = None) -> list[User]:
        query = select(User)
        if role:
            query = query.where(User.role == role)
        result = await self.session.execute(query.order_by(User.email))
        return list(result.scalars().all())
