"""
Organization service: org CRUD and membership management.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFoundError
from app.models.membership import OrgMembership
from app.models.organization import Organization
from app.models.user import User
from app.repositories.organizations import MembershipRepository, OrganizationRepository
from app.repositories.users import UserRepository

from roombook_shared.schemas.organizations import (
    MemberUpsertRequest,
    OrgCreateRequest,
    OrgUpdateRequest,
)
from roombook_shared.schemas.common import OrgStatus

log = structlog.get_logger()


async def list_organizations(session: AsyncSession) -> list[Organization]:
    return await OrganizationRepository(session).list()


async def get_organization(org_id: uuid.UUID, session: AsyncSession) -> Organization:
    org = await OrganizationRepository(session).get(org_id)
    if not org:
        raise NotFoundError("Organization not found")
    return org


async def create_organization(req: OrgCreateRequest, session: AsyncSession) -> Organization:
    """Create an org; slugs are unique."""
    orgs = OrganizationRepository(session)
    if await orgs.get_by_slug(req.slug):
        raise ConflictError("Organization slug already taken")

    try:
        org = await orgs.create(name=req.name, slug=req.slug, status=OrgStatus.ACTIVE.value)
    except IntegrityError:
        raise ConflictError("Organization slug already taken")
    log.info("org.created", org_id=str(org.id), slug=org.slug)
    return org


async def update_organization(
    org_id: uuid.UUID, req: OrgUpdateRequest, session: AsyncSession
) -> Organization:
    """Rename and/or change the status of an org."""
    org = await get_organization(org_id, session)
    changes = {}
    if req.name is not None:
        changes["name"] = req.name
    if req.status is not None:
        changes["status"] = req.status.value
    if not changes:
        return org

    org = await OrganizationRepository(session).update(org, **changes)
    log.info("org.updated", org_id=str(org.id), fields=sorted(changes))
    return org


async def upsert_member(
    org_id: uuid.UUID, req: MemberUpsertRequest, session: AsyncSession
) -> tuple[dict, bool]:
    """Add the user with this email to the org, or change their role.

    Returns (member_info, created).
    """
    org = await get_organization(org_id, session)
    user = await UserRepository(session).get_by_email(req.email)
    if not user:
        raise NotFoundError("User not found")

    membership, created = await MembershipRepository(session).upsert(
        user.id, org.id, req.role.value
    )
    log.info(
        "org.member_upserted",
        org_id=str(org.id),
        user_id=str(user.id),
        role=membership.role,
        created=created,
    )
    return _member_info(membership, user), created


async def list_members(org_id: uuid.UUID, session: AsyncSession) -> list[dict]:
    """List an org's members with their user details."""
    org = await get_organization(org_id, session)
    rows = await MembershipRepository(session).list_for_org(org.id)
    return [_member_info(membership, user) for membership, user in rows]


def _member_info(membership: OrgMembership, user: User) -> dict:
    return {
        "id": membership.id,
        "user_id": user.id,
        "organization_id": membership.organization_id,
        "role": membership.role,
        "email": user.email,
        "name": user.name,
        "created_at": membership.created_at,
    }


async def list_user_organizations(user_id: uuid.UUID, session: AsyncSession) -> list[dict]:
    """List all orgs a user belongs to, with their role."""
    rows = await MembershipRepository(session).list_for_user(user_id)
    return [
        {
            "id": org.id,
            "name": org.name,
            "slug": org.slug,
            "status": org.status,
            "role": membership.role,
        }
        for org, membership in rows
    ]
