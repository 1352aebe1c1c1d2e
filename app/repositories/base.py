"""
Base repository over an ``AsyncSession``.

Repositories own query construction; services own decisions. Transactions
belong to the caller (the request-scoped session commits or rolls back),
so repositories only ``flush``.
"""

from __future__ import annotations

import uuid
from typing import Any, Generic, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

ModelT = TypeVar("ModelT", bound=SQLModel)


class BaseRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, entity_id: uuid.UUID) -> Optional[ModelT]:
        return await self.session.get(self.model, entity_id)

    async def create(self, **fields: Any) -> ModelT:
        entity = self.model(**fields)
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def update(self, entity: ModelT, **fields: Any) -> ModelT:
        for key, value in fields.items():
            setattr(entity, key, value)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: ModelT) -> None:
        await self.session.delete(entity)
        await self.session.flush()
