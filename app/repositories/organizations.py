"""Organization and membership data access."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from app.models.membership import OrgMembership
from app.models.organization import Organization
from app.models.user import User

from .base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    model = Organization

    async def get_by_slug(self, slug: str) -> Optional[Organization]:
        result = await self.session.execute(
            select(Organization).where(Organization.slug == slug)
        )
        return result.scalar_one_or_none()

    async def list(self) -> list[Organization]:
        result = await self.session.execute(select(Organization).order_by(Organization.name))
        return list(result.scalars().all())


class MembershipRepository(BaseRepository[OrgMembership]):
    model = OrgMembership

    async def get_for(
        self, user_id: uuid.UUID, organization_id: uuid.UUID
    ) -> Optional[OrgMembership]:
        result = await self.session.execute(
            select(OrgMembership).where(
                OrgMembership.user_id == user_id,
                OrgMembership.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def upsert(
        self, user_id: uuid.UUID, organization_id: uuid.UUID, role: str
    ) -> tuple[OrgMembership, bool]:
        """Create or re-role a membership. Returns (membership, created)."""
        existing = await self.get_for(user_id, organization_id)
        if existing:
            return await self.update(existing, role=role), False
        try:
            async with self.session.begin_nested():
                membership = await self.create(
                    user_id=user_id, organization_id=organization_id, role=role
                )
        except IntegrityError:
            # Lost a race with a concurrent insert of the same pair.
            existing = await self.get_for(user_id, organization_id)
            if existing is None:
                raise
            return await self.update(existing, role=role), False
        return membership, True

    async def org_ids_for_user(self, user_id: uuid.UUID) -> list[uuid.UUID]:
        result = await self.session.execute(
            select(OrgMembership.organization_id).where(OrgMembership.user_id == user_id)
        )
        return list(result.scalars().all())

    async def list_for_user(
        self, user_id: uuid.UUID
    ) -> list[tuple[Organization, OrgMembership]]:
        result = await self.session.execute(
            select(Organization, OrgMembership)
            .join(OrgMembership, OrgMembership.organization_id == Organization.id)
            .where(OrgMembership.user_id == user_id)
            .order_by(Organization.name)
        )
        return [(org, membership) for org, membership in result.all()]

    async def list_for_org(
        self, organization_id: uuid.UUID
    ) -> list[tuple[OrgMembership, User]]:
        result = await self.session.execute(
            select(OrgMembership, User)
            .join(User, User.id == OrgMembership.user_id)
            .where(OrgMembership.organization_id == organization_id)
            .order_by(User.email)
        )
        return [(membership, user) for membership, user in result.all()]
