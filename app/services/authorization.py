"""
Authorization decisions: who may act on what.

Pure read-and-decide. Every call re-reads current state; nothing is cached
between requests.
"""

from __future__ import annotations

import uuid
from typing import Optional

from app.core.errors import ForbiddenError, NotFoundError
from app.models.user import User
from app.repositories.organizations import MembershipRepository
from app.repositories.users import UserRepository

from roombook_shared.schemas.common import UserRole

# Maximum minutes per booking by system role; None means unlimited.
ROLE_DURATION_LIMITS: dict[str, Optional[int]] = {
    UserRole.USER.value: 120,
    UserRole.OFFICER.value: 180,
    UserRole.ADMIN.value: None,
}


class AuthorizationService:
    def __init__(self, users: UserRepository, memberships: MembershipRepository) -> None:
        self.users = users
        self.memberships = memberships

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.users.get(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def get_membership_org_ids(self, user_id: uuid.UUID) -> list[uuid.UUID]:
        return await self.memberships.org_ids_for_user(user_id)

    async def is_member(self, user_id: uuid.UUID, organization_id: uuid.UUID) -> bool:
        return await self.memberships.get_for(user_id, organization_id) is not None

    @staticmethod
    def is_admin(user: User) -> bool:
        return user.role == UserRole.ADMIN.value

    def require_admin(self, user: User) -> None:
        if not self.is_admin(user):
            raise ForbiddenError("Admin access required")

    def can_manage(self, resource_owner_id: uuid.UUID, user: User) -> bool:
        """Admins manage everything; everyone else only what they own."""
        return self.is_admin(user) or resource_owner_id == user.id

    @staticmethod
    def role_duration_limit(role: str) -> Optional[int]:
        # unknown roles get the most restrictive limit
        return ROLE_DURATION_LIMITS.get(role, ROLE_DURATION_LIMITS[UserRole.USER.value])
