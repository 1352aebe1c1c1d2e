"""Issue report data access."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from app.models.issue import Issue

from .base import BaseRepository


class IssueRepository(BaseRepository[Issue]):
    model = Issue

    async def list(self, status: Optional[str] = None) -> list[Issue]:
        query = select(Issue)
        if status:
            query = query.where(Issue.status == status)
        result = await self.session.execute(query.order_by(Issue.created_at.desc()))
        return list(result.scalars().all())
